"""
Database Module
-------------
Handles the persistent geocode cache: ORM models and store operations.
Uses SQLAlchemy on a local SQLite file with a region table and a per-photo key table.
"""
