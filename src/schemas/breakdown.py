from typing import List, Optional
from pydantic import BaseModel

from services.role_engine.models import Role, Score

class RoleListResponse(BaseModel):
    roles: List[Role]

class RoleResponse(BaseModel):
    ok: bool = True
    roleId: str
    role: Role

class RoleSummary(BaseModel):
    id: str
    name: str
    score: Score
    rank: int  # 1-based
    tier: str
    alignment_label: str
    narrative_variant: str
    narrative: str
    role_desc: str
    core_drive: str
    most_like_when: str
    normalized_position: float

class BreakdownResponse(BaseModel):
    user_id: str
    core_count: int
    peripheral_count: int
    highest_score: Optional[Score] = None
    lowest_score: Optional[Score] = None
    roles: List[RoleSummary]
    selected: Optional[RoleSummary] = None
