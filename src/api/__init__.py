"""
API Module
---------
Provides RESTful API endpoints for the photo geocache using FastAPI.
Features include:
- Resolving photo positions (degrees/minutes/seconds) to place descriptions
- Inspecting the size of the persistent cache
"""
