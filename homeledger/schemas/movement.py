import datetime
from decimal import Decimal
from typing import Annotated
from pydantic import BaseModel, Field
from .common import ORMModel
from ..models.movement import ExpenseCategory, IncomeCategory, ExpenseResponsibility

Amount = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]
Description = Annotated[str, Field(min_length=1, max_length=255)]

class ExpenseCreate(BaseModel):
    family_id: str
    description: Description
    amount: Amount
    date: datetime.date
    category: ExpenseCategory
    responsibility: ExpenseResponsibility

class IncomeCreate(BaseModel):
    family_id: str
    description: Description
    amount: Amount
    date: datetime.date
    category: IncomeCategory

class MovementUpdate(BaseModel):
    description: Description | None = None
    amount: Amount | None = None
    date: datetime.date | None = None
    category: str | None = None
    responsibility: ExpenseResponsibility | None = None

class MovementOut(ORMModel):
    id: str
    family_id: str
    user_id: str
    kind: str
    description: str
    amount: float
    date: datetime.date
    category: str
    responsibility: str | None = None
    created_at: datetime.datetime
    updated_at: datetime.datetime

class MovementDetailOut(MovementOut):
    first_name: str
    last_name: str
    category_color: str
