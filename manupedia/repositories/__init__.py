# manupedia/repositories/__init__.py
"""
Data access layer. Exports the repositories used by the services.
"""

from .manuscript_repo import ManuscriptRepository

__all__ = [
    "ManuscriptRepository",
]
