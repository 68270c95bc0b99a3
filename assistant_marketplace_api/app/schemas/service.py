"""
Pydantic models for services offered by assistants.

A service ties an assistant to a category at an hourly price.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ServiceCreate(BaseModel):
    """Schema for listing a new service.

    ``assistant_id`` defaults to the caller.  Administrators may list a
    service on behalf of any assistant.
    """

    assistant_id: Optional[int] = Field(None, description="Owning assistant; defaults to the caller")
    category_id: int = Field(..., examples=[1])
    price_per_hour: float = Field(..., ge=0, examples=[20.0])
    description: Optional[str] = Field(None, max_length=2000)


class ServiceUpdate(BaseModel):
    assistant_id: Optional[int] = None
    category_id: Optional[int] = None
    price_per_hour: Optional[float] = Field(None, ge=0)
    description: Optional[str] = Field(None, max_length=2000)

    model_config = {"extra": "forbid"}


class ServiceRead(BaseModel):
    id: int
    assistant_id: int
    category_id: int
    price_per_hour: float
    description: Optional[str] = None

    model_config = {
        "from_attributes": True,
    }
