from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, Text, func

from .base import Base, BaseModel


class SensorRule(Base, BaseModel):
    __tablename__ = 'sensor_rules'

    id = Column(Text, primary_key=True)
    machine_id = Column(Text, nullable=False)
    # NULL applies the rule to every sensor reporting the metric on the machine
    sensor_id = Column(Text, ForeignKey('sensors.id', ondelete='SET NULL'), nullable=True)
    metric = Column(Text, nullable=False)
    operator = Column(Text, nullable=False)  # range | gt | lt | eq
    min_value = Column(Float, nullable=True)
    max_value = Column(Float, nullable=True)
    threshold_value = Column(Float, nullable=True)
    priority = Column(Text, nullable=False, server_default='medium')  # low | medium | high | critical
    message = Column(Text, nullable=False)
    enabled = Column(Boolean, nullable=False, default=True, server_default='true')
    # NULL: one alert per violating reading
    cooldown_seconds = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index('idx_sensor_rules_machine', 'machine_id'),
        Index('idx_sensor_rules_sensor', 'sensor_id'),
    )
