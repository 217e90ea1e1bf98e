from pathlib import Path
from typing import Dict, List

import pytest

from services.role_engine.definitions import RoleId
from services.role_engine.loader import load_role_catalog_from_file
from services.role_engine.models import Role

PROJECT_ROOT = Path(__file__).resolve().parent.parent
CATALOG_PATH = PROJECT_ROOT / "assets" / "roles.yml"
RESULTS_PATH = PROJECT_ROOT / "assets" / "user_results.yml"

# Catalog order of the enum, used to build small catalogs
ALL_ROLE_IDS: List[RoleId] = list(RoleId)


def make_role(role_id: RoleId) -> Role:
    """Builds a role whose texts name the variant, so tests can tell them apart."""
    key = role_id.value
    return Role(
        id=role_id,
        name=f"Name {key}",
        role_desc=f"{key}:role_desc",
        core_drive=f"{key}:core_drive",
        most_like_when=f"{key}:most_like_when",
        high_rank_desc=f"{key}:high_rank_desc",
        low_rank_desc=f"{key}:low_rank_desc",
        top_rank_desc=f"{key}:top_rank_desc",
        bottom_rank_desc=f"{key}:bottom_rank_desc",
    )


def make_catalog(size: int) -> List[Role]:
    return [make_role(role_id) for role_id in ALL_ROLE_IDS[:size]]


def raw_record(role_id: RoleId) -> Dict[str, str]:
    """A catalog record in the on-disk shape (core/peripheral key names)."""
    key = role_id.value
    return {
        "id": key,
        "name": f"Name {key}",
        "role_desc": f"{key}:role_desc",
        "core_drive": f"{key}:core_drive",
        "most_like_when": f"{key}:most_like_when",
        "core_rank_desc": f"{key}:high_rank_desc",
        "peripheral_rank_desc": f"{key}:low_rank_desc",
        "top_rank_desc": f"{key}:top_rank_desc",
        "bottom_rank_desc": f"{key}:bottom_rank_desc",
    }


@pytest.fixture(scope="session")
def catalog() -> List[Role]:
    """The shipped role catalog."""
    return load_role_catalog_from_file(str(CATALOG_PATH))


@pytest.fixture
def five_roles() -> List[Role]:
    return make_catalog(5)


@pytest.fixture
def catalog_factory():
    """Returns make_catalog(size): the first `size` roles in enum order."""
    return make_catalog


@pytest.fixture
def raw_record_factory():
    return raw_record


@pytest.fixture(scope="session")
def catalog_path() -> str:
    return str(CATALOG_PATH)


@pytest.fixture(scope="session")
def results_path() -> str:
    return str(RESULTS_PATH)
