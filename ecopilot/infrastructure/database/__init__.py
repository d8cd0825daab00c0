"""
Database package - Infrastructure Layer

MongoDB connection handling and index management for the pipeline's
collections.
"""

from ecopilot.infrastructure.database.mongo_database import MongoDatabase

__all__ = ["MongoDatabase"]
