"""
Domain Layer for Sensor Readings
================================
Contains sensor value objects.
"""

from app.domain.sensors.reading import SensorReading

__all__ = ["SensorReading"]
