from sqlalchemy import JSON, Column, DateTime, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from .base import Base, BaseModel


class Sensor(Base, BaseModel):
    __tablename__ = 'sensors'

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False)        # free form, e.g. motor / temperature
    protocol = Column(Text, nullable=False)    # OPC-UA / MQTT / HTTP / Modbus-TCP, informational
    address = Column(Text, nullable=True)
    # "metadata" is reserved on declarative classes
    sensor_metadata = Column("metadata", JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=dict, server_default='{}')
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    bindings = relationship("SensorBinding", back_populates="sensor", passive_deletes=True)
