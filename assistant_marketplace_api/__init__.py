"""
Top‑level package for the Assistant Marketplace API.

The marketplace connects clients with on‑demand personal assistants
(translators, drivers, chefs, guides, security, childcare).  All
functionality lives in submodules under ``app``; this package only
makes fully qualified imports such as
``assistant_marketplace_api.app.main`` resolvable.
"""

__all__ = []
