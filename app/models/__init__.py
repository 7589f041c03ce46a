"""
Models package initialization.
This file imports all models so they are registered with Base.metadata.
"""

# IMPORTANT: Utiliser la MÊME Base que celle de database.py
from app.core.database import Base

from .review import Review, ReviewStatus, MODERATION_STATUSES

__all__ = ['Base', 'Review', 'ReviewStatus', 'MODERATION_STATUSES']
