"""Small response shapes shared by several routers."""

from pydantic import BaseModel


class StatusMessage(BaseModel):
    """Plain confirmation such as ``{"message": "Service deleted successfully"}``."""

    message: str
