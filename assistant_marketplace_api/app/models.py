"""
Record types held by the storage layer.

These models describe the six entity kinds exactly as the store keeps
them.  They are separate from the API payload schemas in
``schemas``: a stored ``User`` carries its password hash, which no
response schema ever exposes.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    CLIENT = "client"
    ASSISTANT = "assistant"
    ADMIN = "admin"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Location(BaseModel):
    """A point on the map, optionally with a street address."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: Optional[str] = None


class User(BaseModel):
    id: int
    username: str
    email: str
    password_hash: str
    full_name: str
    role: Role = Role.CLIENT
    phone_number: Optional[str] = None
    profile_image: Optional[str] = None
    languages: Optional[List[str]] = None
    bio: Optional[str] = None
    is_verified: bool = False
    avg_rating: Optional[float] = None
    location: Optional[Location] = None
    created_at: datetime
    last_active: datetime


class ServiceCategory(BaseModel):
    id: int
    name: str
    icon: str
    description: Optional[str] = None


class Service(BaseModel):
    id: int
    assistant_id: int
    category_id: int
    price_per_hour: float
    description: Optional[str] = None


class Booking(BaseModel):
    id: int
    client_id: int
    assistant_id: int
    service_id: int
    start_time: datetime
    end_time: datetime
    location: Location
    status: BookingStatus = BookingStatus.PENDING
    total_amount: float
    notes: Optional[str] = None
    created_at: datetime


class Review(BaseModel):
    id: int
    booking_id: int
    client_id: int
    assistant_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime


class Message(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    created_at: datetime
    is_read: bool = False


# Categories every fresh store starts with.
DEFAULT_CATEGORIES = [
    {"name": "Translator", "icon": "ri-translate-2-line", "description": "Language translation services"},
    {"name": "Security", "icon": "ri-shield-check-line", "description": "Personal security and protection"},
    {"name": "Tour Guide", "icon": "ri-route-line", "description": "Guided tours of local attractions"},
    {"name": "Driver", "icon": "ri-car-line", "description": "Private transportation services"},
    {"name": "Chef", "icon": "ri-restaurant-line", "description": "Personal chef for private cooking"},
    {"name": "Childcare", "icon": "ri-heart-line", "description": "Babysitting and childcare services"},
]
