"""
database model module

contains all SQLAlchemy model classes for the telemetry tables.
"""

from .base import Base
from .sensor import Sensor
from .sensor_binding import SensorBinding
from .sensor_rule import SensorRule
from .alert import Alert
from .vision_event import VisionCameraEvent

__all__ = [
    "Base",
    "Sensor",
    "SensorBinding",
    "SensorRule",
    "Alert",
    "VisionCameraEvent",
]

# ensure all models are imported, so Alembic and create_all can detect them
# sensors must be registered before the tables that reference it
