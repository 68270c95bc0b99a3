"""
Pydantic models for service categories.

Categories group assistant services (translation, driving, childcare
and so on).  Only administrators create, update or delete them.
"""

from typing import Optional

from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=80, examples=["Translator"])
    icon: str = Field(..., min_length=1, max_length=80, examples=["ri-translate-2-line"])
    description: Optional[str] = Field(None, max_length=500)


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=80)
    icon: Optional[str] = Field(None, min_length=1, max_length=80)
    description: Optional[str] = Field(None, max_length=500)

    model_config = {"extra": "forbid"}


class CategoryRead(BaseModel):
    id: int
    name: str
    icon: str
    description: Optional[str] = None

    model_config = {
        "from_attributes": True,
    }
