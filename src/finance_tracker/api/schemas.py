from typing import Any

from pydantic import BaseModel, Field


class CategoryRequest(BaseModel):
    name: str


class BudgetRequest(BaseModel):
    amount: float = Field(ge=0)


class FieldRequest(BaseModel):
    value: Any = None
