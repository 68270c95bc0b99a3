"""Helpers shared by the domain services."""

from typing import Any, Dict, Iterable

from pydantic import BaseModel


def partial_changes(update: BaseModel, required_fields: Iterable[str] = ()) -> Dict[str, Any]:
    """Return the fields the client actually sent.

    An explicit ``null`` for a field in ``required_fields`` is dropped,
    leaving the stored value unchanged; other nulls clear the field.
    """
    required = set(required_fields)
    return {
        key: value
        for key, value in update.model_dump(exclude_unset=True).items()
        if value is not None or key not in required
    }
