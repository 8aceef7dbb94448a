"""Database package for Birdwatch.

Database components should be imported directly from their modules:
    from birdwatch.database.core import CoreDatabaseService
    from birdwatch.database.store import EntityStore
"""
