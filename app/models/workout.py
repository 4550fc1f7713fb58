"""Exercise catalog model."""
from sqlalchemy import Column, Integer, String, Index

from app.db.database import Base


class Workout(Base):
    """A catalog exercise. Read-only from the planner's point of view."""
    __tablename__ = "workouts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    # Compound / Accessory; anything else sorts after compounds
    type = Column(String(20), nullable=False, default="Other")

    __table_args__ = (
        Index("ix_workouts_category_type", "category", "type"),
    )

    def __repr__(self):
        return f"<Workout(id={self.id}, name={self.name!r}, category={self.category!r}, type={self.type!r})>"
