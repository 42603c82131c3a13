from datetime import date
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field
from .auth import Password, AdultBirthDate
from .common import ORMModel
from .family import FamilyOut


class UserOut(ORMModel):
    id: str
    email: EmailStr
    first_name: str
    last_name: str
    birth_date: date
    is_active: bool

class UserUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    birth_date: Optional[AdultBirthDate] = None

class PasswordChange(BaseModel):
    old_password: str
    new_password: Password

class MeOut(UserOut):
    families: List[FamilyOut] = []
    role: Optional[str] = None      # role in the user's family, if any
    sections: List[str] = []
