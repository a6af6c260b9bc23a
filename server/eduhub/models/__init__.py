"""
Models package initialization
Import all models here to ensure they are registered with SQLAlchemy
"""

from eduhub.models.store import StoreEntry

__all__ = [
    "StoreEntry",
]
