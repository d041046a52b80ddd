"""
Profile model: a member's public identity.

The id is the identity provider's user id, so a profile row is created
lazily the first time the member saves it.
"""

from sqlalchemy import Column, String, Uuid
from sqlalchemy.orm import relationship

from carpool.db.base import Base, TimestampMixin


class Profile(Base, TimestampMixin):
    __tablename__ = "profiles"

    id = Column(Uuid, primary_key=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    bio = Column(String(1000), nullable=True)

    rides = relationship("Ride", back_populates="driver", lazy="raise")

    @property
    def is_complete(self) -> bool:
        return bool(self.first_name and self.first_name.strip())

    @property
    def display_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, name={self.display_name!r})>"
