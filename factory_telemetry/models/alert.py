from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Text

from .base import Base, BaseModel


class Alert(Base, BaseModel):
    __tablename__ = 'alerts'

    id = Column(Text, primary_key=True)
    machine_id = Column(Text, nullable=False)
    rule_id = Column(Text, ForeignKey('sensor_rules.id', ondelete='SET NULL'), nullable=True)
    sensor_id = Column(Text, ForeignKey('sensors.id', ondelete='SET NULL'), nullable=True)
    metric = Column(Text, nullable=False)
    value = Column(Float, nullable=True)  # calibrated value
    status = Column(Text, nullable=False, server_default='active')  # active | acknowledged
    priority = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index('idx_alerts_status', 'status'),
        Index('idx_alerts_machine', 'machine_id'),
    )
