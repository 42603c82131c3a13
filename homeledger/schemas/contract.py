from datetime import date, datetime
from decimal import Decimal
from typing import Annotated
from pydantic import BaseModel, Field, computed_field
from .common import ORMModel
from ..core.config import settings
from ..models.utility_contract import UtilityType, Periodicity
from ..utils.dates import is_due_within

Cost = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]
Duration = Annotated[int, Field(ge=1, le=36500)]
Label = Annotated[str, Field(min_length=2, max_length=100)]

class ContractCreate(BaseModel):
    dwelling_id: str
    utility_type: UtilityType
    provider: Label
    tariff_plan: Label
    start_date: date
    duration_days: Duration
    periodic_cost: Cost
    periodicity: Periodicity
    payment_due_date: date | None = None

class ContractUpdate(BaseModel):
    utility_type: UtilityType | None = None
    provider: Label | None = None
    tariff_plan: Label | None = None
    start_date: date | None = None
    duration_days: Duration | None = None
    periodic_cost: Cost | None = None
    periodicity: Periodicity | None = None
    payment_due_date: date | None = None

class ContractOut(ORMModel):
    id: str
    dwelling_id: str
    utility_type: str
    provider: str
    tariff_plan: str
    start_date: date
    duration_days: int
    periodic_cost: float
    periodicity: str
    payment_due_date: date | None = None
    file_path: str | None = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def expiring_soon(self) -> bool:
        return is_due_within(self.payment_due_date, settings.EXPIRING_CONTRACT_DAYS)
