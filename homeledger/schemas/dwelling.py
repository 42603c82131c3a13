from datetime import datetime
from typing import Annotated
from pydantic import AfterValidator, BaseModel, Field
from .common import ORMModel
from ..utils.validators import check_postal_code

PostalCode = Annotated[str, AfterValidator(check_postal_code)]
Province = Annotated[str, Field(min_length=2, max_length=2), AfterValidator(str.upper)]

class DwellingCreate(BaseModel):
    family_id: str
    name: str = Field(min_length=2, max_length=100)
    address: str = Field(min_length=5, max_length=255)
    city: str = Field(min_length=2, max_length=100)
    postal_code: PostalCode
    province: Province
    description: str | None = Field(default=None, max_length=500)

class DwellingUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=100)
    address: str | None = Field(default=None, min_length=5, max_length=255)
    city: str | None = Field(default=None, min_length=2, max_length=100)
    postal_code: PostalCode | None = None
    province: Province | None = None
    description: str | None = Field(default=None, max_length=500)

class DwellingOut(ORMModel):
    id: str
    family_id: str
    name: str
    address: str
    city: str | None = None
    postal_code: str | None = None
    province: str | None = None
    description: str | None = None
    created_at: datetime
    updated_at: datetime
