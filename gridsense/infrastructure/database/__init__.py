"""
Database Package - Infrastructure Layer

This package contains database client implementations for different
database systems used by the application.
"""

from .mongo_database import DECISIONS_COLLECTION, RAW_READINGS_COLLECTION, MongoDatabase

__all__ = ["MongoDatabase", "DECISIONS_COLLECTION", "RAW_READINGS_COLLECTION"]
