# services/role_engine/definitions.py
# Static identifiers and defaults for the role breakdown.

from enum import Enum


class RoleId(str, Enum):
    """Closed set of role identifiers known to the catalog."""
    ARCHITECT = "architect"
    CATALYST = "catalyst"
    CONNECTOR = "connector"
    GUARDIAN = "guardian"
    INNOVATOR = "innovator"
    MEDIATOR = "mediator"
    MENTOR = "mentor"
    NAVIGATOR = "navigator"
    STRATEGIST = "strategist"
    VISIONARY = "visionary"


class AlignmentTier(str, Enum):
    CORE = "core"
    INTERMEDIATE = "intermediate"
    PERIPHERAL = "peripheral"


class NarrativeVariant(str, Enum):
    """Which pre-authored text block describes a role at its rank."""
    TOP_RANK = "top_rank_desc"
    BOTTOM_RANK = "bottom_rank_desc"
    HIGH_RANK = "high_rank_desc"    # core tier
    LOW_RANK = "low_rank_desc"      # peripheral tier
    DEFAULT = "role_desc"


# Roles counted from the top / bottom of the ranking
DEFAULT_CORE_COUNT = 4
DEFAULT_PERIPHERAL_COUNT = 3

# Heading word shown on the alignment card
ALIGNMENT_LABELS = {
    AlignmentTier.CORE: "High",
    AlignmentTier.INTERMEDIATE: "Neutral",
    AlignmentTier.PERIPHERAL: "Low",
}

ROLE_IDS = frozenset(role_id.value for role_id in RoleId)


def is_role_id(value) -> bool:
    """True if value names a known role (enum member or its string value)."""
    if isinstance(value, RoleId):
        return True
    return isinstance(value, str) and value in ROLE_IDS


def alignment_label(tier: AlignmentTier) -> str:
    return ALIGNMENT_LABELS[AlignmentTier(tier)]
