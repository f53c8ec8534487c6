"""Dataclass schemas for the catalog, trip entities and generated itineraries."""
