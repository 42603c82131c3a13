from pydantic import BaseModel

class CategoryStatOut(BaseModel):
    category: str
    color: str
    total: float
    count: int
    percentage: float

class MonthlyBalanceOut(BaseModel):
    month: int
    year: int
    total_income: float
    total_expenses: float
    balance: float

class TotalBalanceOut(BaseModel):
    family_id: str
    total_income: float
    total_expenses: float
    balance: float
