"""User account and training profile models."""
from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(120), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # SHA-256 of the plain API token; the plain token is shown once
    api_token_hash = Column(String(64), nullable=True, unique=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    profile = relationship(
        "UserProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email!r})>"


class UserProfile(Base):
    """Demographic and training preference fields consumed by personalization."""
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    birthday = Column(Date, nullable=True)
    height = Column(Float, nullable=True)
    height_unit = Column(String(10), nullable=True)
    weight = Column(Float, nullable=True)
    weight_unit = Column(String(10), nullable=True)
    background = Column(Text, nullable=True)
    training_goal = Column(String(50), nullable=True)
    training_experience = Column(String(50), nullable=True)
    injury_caution_area = Column(String(50), nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="profile")
