from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Text, func
from sqlalchemy.orm import relationship

from .base import Base, BaseModel


class SensorBinding(Base, BaseModel):
    __tablename__ = 'sensor_bindings'

    id = Column(Text, primary_key=True)
    sensor_id = Column(Text, ForeignKey('sensors.id', ondelete='CASCADE'), nullable=False)
    machine_id = Column(Text, nullable=False)  # external machine directory
    metric = Column(Text, nullable=False)
    unit = Column(Text, nullable=True)
    scale = Column(Float, nullable=False, default=1.0, server_default='1')
    offset = Column("offset_value", Float, nullable=False, default=0.0, server_default='0')
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index('idx_sensor_bindings_sensor', 'sensor_id'),
        Index('idx_sensor_bindings_machine', 'machine_id'),
    )

    sensor = relationship("Sensor", back_populates="bindings")
