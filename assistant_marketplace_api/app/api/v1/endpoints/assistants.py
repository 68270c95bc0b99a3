"""
Assistant discovery endpoints for API v1.

``GET /assistants/nearby`` returns assistants within a radius of a
point, nearest first.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from assistant_marketplace_api.app.core.config import settings
from assistant_marketplace_api.app.core.errors import ValidationError
from assistant_marketplace_api.app.models import Location
from assistant_marketplace_api.app.schemas.user import UserRead
from assistant_marketplace_api.app.services.user_service import UserService
from assistant_marketplace_api.app.storage import Storage, get_storage

router = APIRouter()


@router.get("/nearby", response_model=List[UserRead])
async def nearby_assistants(
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Latitude of the search center"),
    lng: Optional[float] = Query(None, ge=-180, le=180, description="Longitude of the search center"),
    radius: Optional[float] = Query(None, gt=0, description="Search radius in kilometres"),
    storage: Storage = Depends(get_storage),
) -> List[UserRead]:
    """Find assistants near a point.

    ``radius`` defaults to ``DEFAULT_SEARCH_RADIUS_KM`` (10 km).
    """
    if lat is None or lng is None:
        raise ValidationError("Location coordinates required")
    radius_km = radius if radius is not None else settings.default_search_radius_km
    return await UserService.nearby_assistants(storage, Location(lat=lat, lng=lng), radius_km)
