"""
Data Models Module
----------------
Contains Pydantic models for data validation and serialization.
Defines the structure of geocode requests, coordinates, bounding boxes and
raw places returned by the reverse geocoding service.
"""
