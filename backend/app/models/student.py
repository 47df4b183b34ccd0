"""
Modèle SQLAlchemy pour la table students.
Les contraintes UNIQUE sur student_id et email sont garanties par la base,
y compris entre écritures concurrentes.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Uuid

from app.database import Base


def utcnow() -> datetime:
    """Instant courant en UTC, sans tzinfo (format de stockage des dates)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Student(Base):
    __tablename__ = "students"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    student_id = Column(String(50), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True)
    major = Column(String(150), nullable=True)
    enrollment_date = Column(DateTime, nullable=False, default=utcnow)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
