from datetime import date
from typing import Annotated
from pydantic import AfterValidator, BaseModel, EmailStr, Field
from ..utils.validators import check_password_strength, check_adult

Password = Annotated[str, AfterValidator(check_password_strength)]
AdultBirthDate = Annotated[date, AfterValidator(check_adult)]

class SignupIn(BaseModel):
    email: EmailStr
    password: Password
    first_name: str = Field(min_length=2, max_length=100)
    last_name: str = Field(min_length=2, max_length=100)
    birth_date: AdultBirthDate

class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    refresh_token: str | None = None

class RefreshIn(BaseModel):
    refresh_token: str
