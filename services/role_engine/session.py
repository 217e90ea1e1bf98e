import logging
from typing import List, Optional

from services.role_engine.definitions import AlignmentTier
from services.role_engine.engine import RoleBreakdown, RoleRef
from services.role_engine.models import ScoredRole, SelectionNotFound

logger = logging.getLogger(__name__)


class BreakdownSession:
    """
    Selection state for one viewer of a breakdown: the role being inspected
    and the tier tab being shown. The breakdown itself is never mutated;
    reset() swaps in a freshly computed one.
    """

    def __init__(self, breakdown: RoleBreakdown):
        self._breakdown = breakdown
        self.selected_role_id: Optional[str] = None
        self.selected_nav: AlignmentTier = AlignmentTier.CORE
        self._select_top()

    def _select_top(self) -> None:
        if self._breakdown.is_empty:
            self.selected_role_id = None
            self.selected_nav = AlignmentTier.CORE
            return
        top = self._breakdown.ranked[0]
        self.selected_role_id = top.id.value
        self.selected_nav = self._breakdown.tier_of(top)

    @property
    def breakdown(self) -> RoleBreakdown:
        return self._breakdown

    @property
    def selected_role(self) -> Optional[ScoredRole]:
        if self.selected_role_id is None:
            return None
        return self._breakdown.get(self.selected_role_id)

    @property
    def selected_description(self) -> Optional[str]:
        role = self.selected_role
        return self._breakdown.describe(role) if role is not None else None

    @property
    def visible_roles(self) -> List[ScoredRole]:
        """Roles under the current tier tab."""
        return self._breakdown.roles_in_tier(self.selected_nav)

    def select(self, role_id: RoleRef) -> ScoredRole:
        """Selects a ranked role and moves the tier tab to its tier."""
        if role_id not in self._breakdown:
            logger.warning(f"Rejected selection of role outside the ranking: {getattr(role_id, 'id', role_id)}")
            raise SelectionNotFound(getattr(role_id, 'id', role_id))
        role = self._breakdown.get(role_id)
        self.selected_role_id = role.id.value
        self.selected_nav = self._breakdown.tier_of(role)
        return role

    def select_nav(self, tier: AlignmentTier) -> None:
        self.selected_nav = AlignmentTier(tier)

    def reset(self, breakdown: RoleBreakdown) -> None:
        """Replaces the breakdown after the inputs changed and reselects the top role."""
        self._breakdown = breakdown
        self._select_top()
