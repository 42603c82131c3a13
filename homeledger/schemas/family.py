from datetime import datetime
from typing import List
from pydantic import BaseModel, Field
from .common import ORMModel
from .member import MemberOut
from ..models.family import INVITE_CODE_LENGTH

class FamilyCreate(BaseModel):
    surname: str = Field(min_length=2, max_length=100)

class FamilyJoin(BaseModel):
    invite_code: str = Field(min_length=INVITE_CODE_LENGTH, max_length=INVITE_CODE_LENGTH)

class FamilyOut(ORMModel):
    id: str
    surname: str
    invite_code: str
    created_at: datetime
    members: List[MemberOut] = []
