"""
Vehicles registered by members.
"""

import uuid

from sqlalchemy import Column, ForeignKey, Integer, String, Uuid, CheckConstraint

from carpool.db.base import Base, TimestampMixin


class Vehicle(Base, TimestampMixin):
    __tablename__ = "vehicles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    make = Column(String(50), nullable=False)
    model = Column(String(50), nullable=False)
    year = Column(Integer, nullable=False)
    color = Column(String(50), nullable=False)
    license_plate = Column(String(20), nullable=True)
    drivetrain = Column(String(3), nullable=False)

    __table_args__ = (
        CheckConstraint("drivetrain IN ('FWD', 'RWD', 'AWD', '4WD')", name="check_vehicle_drivetrain"),
    )

    def __repr__(self) -> str:
        return f"<Vehicle(id={self.id}, owner={self.owner_id}, {self.year} {self.make} {self.model})>"
