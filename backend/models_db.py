"""SQLAlchemy ORM models."""
from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, Float, DateTime, Text, Index
from backend.database import Base

class Calculation(Base):
    """A saved enclosure calculation, unique by user-chosen name."""
    __tablename__ = "calculations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, unique=True, nullable=False)
    parsed_text = Column(Text, nullable=False, default="")
    fs = Column(Float, nullable=False)
    qts = Column(Float, nullable=False)
    vas = Column(Float, nullable=False)
    enclosure_type = Column(String, nullable=False)
    width = Column(Float, nullable=False)
    height = Column(Float, nullable=False)
    depth = Column(Float, nullable=False)
    volume = Column(Float, nullable=False)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_calculations_created_at", "created_at"),
        {"sqlite_autoincrement": True},
    )
