from sqlalchemy import CheckConstraint, Column, DateTime, Float, Index, Text

from .base import Base, BaseModel


class VisionCameraEvent(Base, BaseModel):
    """Point-in-time machine state observed by the vision inference process."""
    __tablename__ = 'vision_camera_events'

    id = Column(Text, primary_key=True)
    camera_id = Column(Text, nullable=True)
    machine_id = Column(Text, nullable=False)
    roi_id = Column(Text, nullable=True)
    status = Column(Text, nullable=False)
    confidence = Column(Float, nullable=True)
    frame_time = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("status IN ('active','inactive')", name='ck_vision_camera_events_status'),
        Index('idx_vision_events_machine_time', 'machine_id', 'created_at'),
        Index('idx_vision_events_camera_time', 'camera_id', 'created_at'),
        Index('idx_vision_events_roi_time', 'roi_id', 'created_at'),
    )
