"""
==============================================================================
Database Package
==============================================================================

SQLAlchemy infrastructure behind the product document store.

Architecture:
------------
├── database.py   - DatabaseManager class, session factory
└── models.py     - ProductDocument table

Usage:
------
    from app.db import DatabaseManager

    db_manager = DatabaseManager()
    db_manager.create_tables()
    with db_manager.session_scope() as session:
        ...

==============================================================================
"""

from .database import Base, DatabaseManager, get_database_manager
from .models import ProductDocument

__all__ = [
    "Base",
    "DatabaseManager",
    "get_database_manager",
    "ProductDocument",
]
