import datetime as dt
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from finance_tracker.domain.currency import DEFAULT_RATES, SUPPORTED_CURRENCIES


class CamelModel(BaseModel):
    # Stored and exported payloads use camelCase keys
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Transaction(CamelModel):
    id: str
    description: str
    amount: float = Field(ge=0)
    category: str
    date: dt.date
    created_at: dt.datetime
    updated_at: dt.datetime

    @model_validator(mode="after")
    def check_timestamps(self) -> "Transaction":
        if (self.created_at.tzinfo is None) != (self.updated_at.tzinfo is None):
            raise ValueError("createdAt and updatedAt must both carry a timezone or neither")
        if self.created_at > self.updated_at:
            raise ValueError("createdAt must not be later than updatedAt")
        return self


class TransactionDraft(BaseModel):
    """Raw form input; checked by the validators before it becomes a Transaction."""
    description: Optional[str] = None
    amount: Union[str, float, None] = None
    category: Optional[str] = None
    date: Optional[str] = None


class Settings(CamelModel):
    base_currency: Literal["USD", "EUR", "GBP"] = "USD"
    rates: dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_RATES))

    @field_validator("rates")
    @classmethod
    def check_rates(cls, rates: dict[str, float]) -> dict[str, float]:
        for code, rate in rates.items():
            if code not in SUPPORTED_CURRENCIES:
                raise ValueError(f"Unsupported currency: {code}")
            if rate <= 0:
                raise ValueError(f"Rate for {code} must be positive")
        missing = [code for code in SUPPORTED_CURRENCIES if code not in rates]
        if missing:
            raise ValueError(f"Missing rate for {', '.join(missing)}")
        return rates


class ValidationResult(BaseModel):
    valid: bool
    message: str = ""


class RecordCheck(BaseModel):
    valid: bool
    errors: dict[str, str] = Field(default_factory=dict)


class ImportResult(BaseModel):
    success: bool
    message: str


class ExportBundle(CamelModel):
    transactions: list[Transaction]
    settings: Settings
    categories: list[str]
    budget_cap: float
    export_date: dt.datetime


class DashboardStats(CamelModel):
    total: int
    total_expenses: float
    top_category: str
    top_category_amount: float
    week_total: float
    daily_totals: dict[dt.date, float]
    budget_cap: float


class CategoryShare(CamelModel):
    category: str
    amount: float
    share: float  # fraction of the largest category


class MonthlyTotal(CamelModel):
    month: str  # YYYY-MM
    amount: float
    share: float
    trend: Optional[Literal["increased", "decreased", "flat"]] = None


class BudgetStatus(CamelModel):
    cap: float
    spent: float
    percentage: float
    progress: float
    remaining: float
    state: Literal["normal", "warning", "over"]


class Dashboard(CamelModel):
    stats: DashboardStats
    categories: list[CategoryShare]
    monthly: list[MonthlyTotal]
    budget: Optional[BudgetStatus] = None
    currency: str
    symbol: str
