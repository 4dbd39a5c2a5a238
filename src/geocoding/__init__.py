"""
Geocoding Module
--------------
Resolves photo coordinates (degrees/minutes/seconds) into short place descriptions.
Uses OpenStreetMap's Nominatim API behind a persistent region and per-photo cache
so nearby photos share one lookup.
"""
