import logging
from typing import Any, Dict, List, Sequence, Union

import yaml
from pydantic import ValidationError

from services.role_engine.definitions import RoleId, is_role_id
from services.role_engine.models import CatalogValidationError, Role, RoleNotFoundError

logger = logging.getLogger(__name__)


def load_role_catalog_data(records: Sequence[Dict[str, Any]], require_complete: bool = True) -> List[Role]:
    """
    Validates raw catalog records against the Role model and checks the
    catalog invariants: no duplicate ids and, when require_complete is set,
    one record for every RoleId.

    Catalog order is preserved; it is the tie-break order used by ranking.
    """
    if not isinstance(records, (list, tuple)):
        raise CatalogValidationError(f"Role catalog must be a list of records, got {type(records).__name__}")

    try:
        roles = [Role.model_validate(record) for record in records]
    except ValidationError as e:
        # Re-raise Pydantic's validation error for schema issues
        raise e

    seen_ids = set()
    for role in roles:
        if role.id in seen_ids:
            raise CatalogValidationError(f"Duplicate role ID found: {role.id.value}")
        seen_ids.add(role.id)

    if require_complete:
        missing = [role_id.value for role_id in RoleId if role_id not in seen_ids]
        if missing:
            raise CatalogValidationError(f"Role catalog is missing records for: {', '.join(missing)}")

    logger.debug(f"Loaded role catalog with {len(roles)} roles")
    return roles


def load_role_catalog_from_file(file_path: str, require_complete: bool = True) -> List[Role]:
    """
    Loads the role catalog from a YAML file (JSON is accepted too, being a
    YAML subset). The file holds either a bare list of records or a mapping
    with a top-level 'roles' list.
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise CatalogValidationError(f"File not found: {file_path}")
    except yaml.YAMLError as e:
        raise CatalogValidationError(f"Error parsing YAML file {file_path}: {e}")

    if data is None:
        raise CatalogValidationError(f"YAML file is empty or invalid: {file_path}")

    if isinstance(data, dict):
        if 'roles' not in data:
            raise CatalogValidationError(f"No 'roles' list found in {file_path}")
        data = data['roles']

    roles = load_role_catalog_data(data, require_complete=require_complete)
    logger.info(f"Role catalog loaded from {file_path}: {len(roles)} roles")
    return roles


def get_role_by_id(roles: Sequence[Role], role_id: Union[RoleId, str]) -> Role:
    """Returns the catalog record for role_id or raises RoleNotFoundError."""
    if not is_role_id(role_id):
        raise RoleNotFoundError(f"Invalid role ID: {role_id}")
    role_id = RoleId(role_id)
    for role in roles:
        if role.id == role_id:
            return role
    raise RoleNotFoundError(f"Role not found: {role_id.value}")
