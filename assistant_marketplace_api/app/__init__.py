"""
Application package initializer.

The project is organised into layers: ``core`` (configuration, logging,
security, errors and geo helpers), ``storage`` (the record store
contract and its in‑memory and SQLite implementations), ``services``
(authorization and business rules) and ``api`` (versioned FastAPI
routers).  Each domain (users, categories, services, bookings, reviews,
messages) exposes a router defined in ``api/v1/endpoints``.
"""

from .main import app  # noqa: F401
