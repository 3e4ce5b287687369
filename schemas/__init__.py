"""
Pydantic schemas for search configuration.
"""

from .config import SearchConfig, default_homes

__all__ = [
    "SearchConfig",
    "default_homes",
]
