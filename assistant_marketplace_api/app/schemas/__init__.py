"""
Pydantic schema definitions for API payloads.

Each domain (users, categories, services, bookings, reviews, messages)
defines its own request and response models.  Schemas are separated
from the stored record types in ``models`` so that, for example, a
user's password hash can never leak into a response.
"""
