"""
Service layer.

Each service encapsulates the business and authorization rules for one
domain and talks to persistence only through the ``Storage`` contract
passed in by the caller.
"""
