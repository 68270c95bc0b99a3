"""
Cross‑cutting infrastructure: configuration, logging, security,
error taxonomy, SQLite connection handling and geo helpers.
"""
