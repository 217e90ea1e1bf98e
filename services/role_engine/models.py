from typing import Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from services.role_engine.definitions import RoleId

# Integers stay integers; scores are not bounded
Score = Union[int, float]


class Role(BaseModel):
    """A catalog role with its five narrative variants."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: RoleId
    name: str
    role_desc: str
    core_drive: str
    most_like_when: str
    # Raw catalog records call these core_rank_desc / peripheral_rank_desc
    high_rank_desc: str = Field(..., validation_alias=AliasChoices('high_rank_desc', 'core_rank_desc'))
    low_rank_desc: str = Field(..., validation_alias=AliasChoices('low_rank_desc', 'peripheral_rank_desc'))
    top_rank_desc: str
    bottom_rank_desc: str


class ScoredRole(Role):
    score: Score = 0

    @classmethod
    def from_role(cls, role: Role, score: Score) -> "ScoredRole":
        return cls(**role.model_dump(exclude={"score"}), score=score)


# Custom Error Classes
class CatalogValidationError(ValueError):
    """Raised when the role catalog is malformed, incomplete or has duplicate ids."""
    pass

class ResultsStoreError(ValueError):
    """Raised when stored user results cannot be loaded."""
    pass

class RoleNotFoundError(LookupError):
    """Raised when a role id is valid but missing from the catalog."""
    pass

class SelectionNotFound(LookupError):
    """Raised when a caller selects a role id that is not in the current ranking."""

    def __init__(self, role_id):
        self.role_id = getattr(role_id, 'value', role_id)
        super().__init__(f"Role '{self.role_id}' is not part of the current ranking")
