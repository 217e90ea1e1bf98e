# services/role_engine/engine.py
# Ranks a user's role scores and derives tiers and narrative text from the ranking.

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from config.settings import get_settings
from services.role_engine.definitions import (
    DEFAULT_CORE_COUNT,
    DEFAULT_PERIPHERAL_COUNT,
    AlignmentTier,
    NarrativeVariant,
    RoleId,
    alignment_label,
)
from services.role_engine.models import Role, Score, ScoredRole, SelectionNotFound

logger = logging.getLogger(__name__)

RoleRef = Union[Role, RoleId, str]

# --- Rule Tables ---

# (tier, predicate(position, n, core_count, peripheral_count)); first match wins.
# Core is checked first, so a position inside both windows is core.
TIER_RULES: List[Tuple[AlignmentTier, Callable[[int, int, int, int], bool]]] = [
    (AlignmentTier.CORE, lambda position, n, core_count, peripheral_count: position < core_count),
    (AlignmentTier.PERIPHERAL, lambda position, n, core_count, peripheral_count: position >= n - peripheral_count),
]
FALLBACK_TIER = AlignmentTier.INTERMEDIATE

# (variant, predicate(score, tier, highest, lowest)); first match wins.
NARRATIVE_RULES: List[Tuple[NarrativeVariant, Callable[[Score, AlignmentTier, Score, Score], bool]]] = [
    (NarrativeVariant.TOP_RANK, lambda score, tier, highest, lowest: score == highest),
    (NarrativeVariant.BOTTOM_RANK, lambda score, tier, highest, lowest: score == lowest),
    (NarrativeVariant.HIGH_RANK, lambda score, tier, highest, lowest: tier == AlignmentTier.CORE),
    (NarrativeVariant.LOW_RANK, lambda score, tier, highest, lowest: tier == AlignmentTier.PERIPHERAL),
]
FALLBACK_VARIANT = NarrativeVariant.DEFAULT


def _role_key(role: RoleRef) -> str:
    """Normalizes a Role, RoleId or plain string to the role id string."""
    if isinstance(role, Role):
        role = role.id
    return getattr(role, 'value', role)


def _check_counts(core_count: int, peripheral_count: int) -> None:
    if core_count < 0 or peripheral_count < 0:
        raise ValueError(f"Tier counts must be non-negative (core={core_count}, peripheral={peripheral_count})")


def _position_of(ranked: Sequence[ScoredRole], role: RoleRef) -> int:
    key = _role_key(role)
    for position, scored in enumerate(ranked):
        if scored.id.value == key:
            return position
    raise SelectionNotFound(key)


# --- Score Join ---

def join(roles: Sequence[Role], results: Mapping[Any, Optional[Score]]) -> List[ScoredRole]:
    """
    Attaches the user's score to every catalog role.

    Roles without a score, or with a null one, get 0 and stay rankable. Result keys that do not
    match a catalog role are ignored. Catalog order is kept.
    """
    scores = {_role_key(key): value for key, value in results.items()}
    catalog_ids = {role.id.value for role in roles}

    unknown = sorted(str(key) for key in scores if key not in catalog_ids)
    if unknown:
        logger.debug(f"Ignoring scores for unknown role ids: {unknown}")

    scored = []
    for role in roles:
        score = scores.get(role.id.value)
        scored.append(ScoredRole.from_role(role, 0 if score is None else score))
    return scored


# --- Ranking Engine ---

def rank(scored: Sequence[ScoredRole]) -> List[ScoredRole]:
    """Orders roles by score, highest first. Equal scores keep their input order."""
    return sorted(scored, key=lambda role: role.score, reverse=True)


# --- Alignment Classifier ---

def classify(
    ranked: Sequence[ScoredRole],
    position: int,
    core_count: int = DEFAULT_CORE_COUNT,
    peripheral_count: int = DEFAULT_PERIPHERAL_COUNT,
) -> AlignmentTier:
    """Returns the tier of the role at a 0-based position in the ranking."""
    _check_counts(core_count, peripheral_count)
    n = len(ranked)
    if not 0 <= position < n:
        raise IndexError(f"Position {position} is outside a ranking of {n} roles")

    for tier, predicate in TIER_RULES:
        if predicate(position, n, core_count, peripheral_count):
            return tier
    return FALLBACK_TIER


def tier_of(
    ranked: Sequence[ScoredRole],
    role_id: RoleRef,
    core_count: int = DEFAULT_CORE_COUNT,
    peripheral_count: int = DEFAULT_PERIPHERAL_COUNT,
) -> AlignmentTier:
    return classify(ranked, _position_of(ranked, role_id), core_count, peripheral_count)


def roles_in_tier(
    ranked: Sequence[ScoredRole],
    tier: AlignmentTier,
    core_count: int = DEFAULT_CORE_COUNT,
    peripheral_count: int = DEFAULT_PERIPHERAL_COUNT,
) -> List[ScoredRole]:
    """The ranked roles falling in one tier, in rank order."""
    tier = AlignmentTier(tier)
    return [
        role for position, role in enumerate(ranked)
        if classify(ranked, position, core_count, peripheral_count) == tier
    ]


# --- Narrative Selector ---

def select_variant(
    role: RoleRef,
    ranked: Sequence[ScoredRole],
    core_count: int = DEFAULT_CORE_COUNT,
    peripheral_count: int = DEFAULT_PERIPHERAL_COUNT,
) -> NarrativeVariant:
    """
    Picks which narrative variant describes a ranked role.

    Rank extremes (tied for highest, then tied for lowest) take precedence
    over the generic core / peripheral tier text.
    """
    position = _position_of(ranked, role)
    score = ranked[position].score
    tier = classify(ranked, position, core_count, peripheral_count)
    highest, lowest = ranked[0].score, ranked[-1].score

    for variant, predicate in NARRATIVE_RULES:
        if predicate(score, tier, highest, lowest):
            return variant
    return FALLBACK_VARIANT


def describe(
    role: RoleRef,
    ranked: Sequence[ScoredRole],
    core_count: int = DEFAULT_CORE_COUNT,
    peripheral_count: int = DEFAULT_PERIPHERAL_COUNT,
) -> str:
    """Returns the pre-authored text for the role's selected variant, verbatim."""
    variant = select_variant(role, ranked, core_count, peripheral_count)
    return getattr(ranked[_position_of(ranked, role)], variant.value)


def normalized_position(role: RoleRef, ranked: Sequence[ScoredRole]) -> float:
    """
    Where the role's score sits between the lowest (0) and highest (100)
    score in the ranking. When every score is equal, all roles sit at 100.
    """
    score = ranked[_position_of(ranked, role)].score
    highest, lowest = ranked[0].score, ranked[-1].score
    if highest == lowest:
        return 100.0
    return (score - lowest) / (highest - lowest) * 100.0


# --- Breakdown ---

class RoleBreakdown:
    """
    Immutable result of one ranking pass: the ranked roles plus the tier,
    narrative and scale lookups the presentation layer needs to render them.
    """

    def __init__(
        self,
        ranked: Sequence[ScoredRole],
        core_count: int = DEFAULT_CORE_COUNT,
        peripheral_count: int = DEFAULT_PERIPHERAL_COUNT,
    ):
        _check_counts(core_count, peripheral_count)
        self._ranked: Tuple[ScoredRole, ...] = tuple(ranked)
        self._core_count = core_count
        self._peripheral_count = peripheral_count
        self._tiers: Dict[str, AlignmentTier] = {
            role.id.value: classify(self._ranked, position, core_count, peripheral_count)
            for position, role in enumerate(self._ranked)
        }

    @property
    def ranked(self) -> Tuple[ScoredRole, ...]:
        return self._ranked

    @property
    def core_count(self) -> int:
        return self._core_count

    @property
    def peripheral_count(self) -> int:
        return self._peripheral_count

    @property
    def is_empty(self) -> bool:
        return not self._ranked

    @property
    def highest_score(self) -> Optional[Score]:
        return self._ranked[0].score if self._ranked else None

    @property
    def lowest_score(self) -> Optional[Score]:
        return self._ranked[-1].score if self._ranked else None

    def __len__(self) -> int:
        return len(self._ranked)

    def __contains__(self, role: RoleRef) -> bool:
        return _role_key(role) in self._tiers

    def get(self, role_id: RoleRef) -> ScoredRole:
        return self._ranked[_position_of(self._ranked, role_id)]

    def rank_of(self, role_id: RoleRef) -> int:
        """1-based rank of the role."""
        return _position_of(self._ranked, role_id) + 1

    def tier_of(self, role_id: RoleRef) -> AlignmentTier:
        key = _role_key(role_id)
        if key not in self._tiers:
            raise SelectionNotFound(key)
        return self._tiers[key]

    def roles_in_tier(self, tier: AlignmentTier) -> List[ScoredRole]:
        tier = AlignmentTier(tier)
        return [role for role in self._ranked if self._tiers[role.id.value] == tier]

    def variant_of(self, role: RoleRef) -> NarrativeVariant:
        return select_variant(role, self._ranked, self._core_count, self._peripheral_count)

    def describe(self, role: RoleRef) -> str:
        return describe(role, self._ranked, self._core_count, self._peripheral_count)

    def normalized_position(self, role: RoleRef) -> float:
        return normalized_position(role, self._ranked)

    def role_summary(self, role: RoleRef) -> Dict[str, Any]:
        """Everything the detail view shows for one role."""
        scored = self.get(role)
        tier = self.tier_of(scored)
        variant = self.variant_of(scored)
        return {
            "id": scored.id.value,
            "name": scored.name,
            "score": scored.score,
            "rank": self.rank_of(scored),
            "tier": tier.value,
            "alignment_label": alignment_label(tier),
            "narrative_variant": variant.value,
            "narrative": getattr(scored, variant.value),
            "role_desc": scored.role_desc,
            "core_drive": scored.core_drive,
            "most_like_when": scored.most_like_when,
            "normalized_position": self.normalized_position(scored),
        }

    def to_summary(self) -> Dict[str, Any]:
        return {
            "core_count": self._core_count,
            "peripheral_count": self._peripheral_count,
            "highest_score": self.highest_score,
            "lowest_score": self.lowest_score,
            "roles": [self.role_summary(role) for role in self._ranked],
        }


def compute_breakdown(
    roles: Sequence[Role],
    results: Mapping[Any, Optional[Score]],
    core_count: Optional[int] = None,
    peripheral_count: Optional[int] = None,
) -> RoleBreakdown:
    """
    Joins, ranks and classifies in one pass. Counts left as None come from
    the configured settings.
    """
    if core_count is None or peripheral_count is None:
        settings = get_settings()
        core_count = settings.core_count if core_count is None else core_count
        peripheral_count = settings.peripheral_count if peripheral_count is None else peripheral_count

    ranked = rank(join(roles, results))
    logger.debug(f"Ranked {len(ranked)} roles (core={core_count}, peripheral={peripheral_count})")
    return RoleBreakdown(ranked, core_count=core_count, peripheral_count=peripheral_count)
