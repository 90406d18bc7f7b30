"""
Item-related Pydantic models
"""

from typing import List, Optional
from enum import Enum
from pydantic import BaseModel, Field


class WhereOperator(str, Enum):
    """Comparison operators for field queries"""
    EQ = "=="
    NE = "!="
    LT = "<"
    LTE = "<="
    GT = ">"
    GTE = ">="
    IN = "in"
    NOT_IN = "not-in"
    ARRAY_CONTAINS = "array-contains"


class Item(BaseModel):
    id: str
    title: str = ""
    content: str = ""


class ItemCreateRequest(BaseModel):
    title: str = Field(..., max_length=500)
    content: str = Field("", max_length=10000)


class ItemUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, max_length=500)
    content: Optional[str] = Field(None, max_length=10000)


class ItemListResponse(BaseModel):
    count: int
    items: List[Item]

