from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Dict, List, Optional
import logging

from config.settings import RoleEngineSettings, get_settings
from src.schemas.breakdown import BreakdownResponse, RoleListResponse, RoleResponse
from services.role_engine.definitions import is_role_id
from services.role_engine.engine import compute_breakdown
from services.role_engine.loader import get_role_by_id, load_role_catalog_from_file
from services.role_engine.models import Role, RoleNotFoundError, Score, SelectionNotFound
from services.role_engine.results_store import ResultsStore, is_user_id
from services.role_engine.session import BreakdownSession

router = APIRouter()
logger = logging.getLogger(__name__)

_catalog_cache: Dict[str, List[Role]] = {}
_store_cache: Dict[str, ResultsStore] = {}


def get_role_catalog(settings: RoleEngineSettings = Depends(get_settings)) -> List[Role]:
    # The catalog is static; load it once per path
    if settings.catalog_path not in _catalog_cache:
        _catalog_cache[settings.catalog_path] = load_role_catalog_from_file(settings.catalog_path)
    return _catalog_cache[settings.catalog_path]


def get_results_store(settings: RoleEngineSettings = Depends(get_settings)) -> ResultsStore:
    if settings.results_path not in _store_cache:
        _store_cache[settings.results_path] = ResultsStore.from_file(settings.results_path)
    return _store_cache[settings.results_path]


def _require_user_results(user_id: Optional[str], store: ResultsStore) -> Dict[str, Score]:
    if not user_id or not is_user_id(user_id):
        raise HTTPException(status_code=400, detail="Missing userID")
    results = store.get_user_results(user_id)
    if results is None:
        raise HTTPException(status_code=404, detail="Results not found")
    return results


@router.get("/roles", response_model=RoleListResponse)
async def list_roles(roles: List[Role] = Depends(get_role_catalog)):
    """Returns the full role catalog in catalog order."""
    return RoleListResponse(roles=roles)


@router.get("/roles/{role_id}", response_model=RoleResponse)
async def get_role(role_id: str, roles: List[Role] = Depends(get_role_catalog)):
    if not is_role_id(role_id):
        raise HTTPException(status_code=400, detail="Missing or invalid role")
    try:
        role = get_role_by_id(roles, role_id)
    except RoleNotFoundError as e:
        logger.warning(f"Role lookup failed: {e}", extra={"role_id": role_id})
        raise HTTPException(status_code=404, detail="Role not found")
    return RoleResponse(roleId=role.id.value, role=role)


@router.get("/userResults")
async def get_user_results(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    store: ResultsStore = Depends(get_results_store),
) -> Dict[str, Score]:
    """Returns the user's raw role scores as stored."""
    return _require_user_results(user_id, store)


@router.get("/breakdown", response_model=BreakdownResponse)
async def get_breakdown(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    selected_role_id: Optional[str] = Query(default=None, alias="selectedRoleId"),
    roles: List[Role] = Depends(get_role_catalog),
    store: ResultsStore = Depends(get_results_store),
    settings: RoleEngineSettings = Depends(get_settings),
):
    """
    Ranks the user's roles and returns every role's tier and narrative,
    plus the detail for the selected role (the top role by default).
    """
    results = _require_user_results(user_id, store)
    breakdown = compute_breakdown(
        roles, results,
        core_count=settings.core_count,
        peripheral_count=settings.peripheral_count,
    )
    session = BreakdownSession(breakdown)

    if selected_role_id is not None:
        try:
            session.select(selected_role_id)
        except SelectionNotFound as e:
            logger.warning(f"Invalid selection: {e}", extra={"user_id": user_id, "selected_role_id": selected_role_id})
            raise HTTPException(status_code=404, detail=str(e))

    summary = breakdown.to_summary()
    selected = breakdown.role_summary(session.selected_role) if session.selected_role is not None else None
    logger.info(
        f"Breakdown computed: {len(breakdown)} roles",
        extra={"user_id": user_id, "selected_role_id": session.selected_role_id},
    )
    return BreakdownResponse(user_id=user_id, selected=selected, **summary)
