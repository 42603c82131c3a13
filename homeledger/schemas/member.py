from datetime import datetime
from pydantic import BaseModel, Field
from .common import ORMModel
from ..models.family_member import MemberRole

class MemberOut(ORMModel):
    id: str
    family_id: str
    user_id: str
    role: str
    joined_at: datetime
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None

class RoleUpdate(BaseModel):
    role: MemberRole

class InviteCodeOut(BaseModel):
    family_id: str
    invite_code: str = Field(min_length=8, max_length=8)
