"""
Schémas Pydantic pour les élèves.
Le JSON exposé utilise les noms camelCase (firstName, studentId...),
le code Python les noms snake_case.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

INPUT_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


def _strip_required(v: Optional[str]) -> str:
    if v is None:
        raise ValueError("Le champ ne peut pas être nul.")
    if not v.strip():
        raise ValueError("Le champ ne peut pas être vide.")
    return v.strip()


def _to_utc_naive(v: Optional[datetime]) -> Optional[datetime]:
    """Les dates sont stockées en UTC sans tzinfo."""
    if v is not None and v.tzinfo is not None:
        return v.astimezone(timezone.utc).replace(tzinfo=None)
    return v


def _parse_day(v):
    """Accepte une date seule (YYYY-MM-DD) en plus d'un datetime ISO : minuit UTC."""
    if isinstance(v, str) and len(v.strip()) == 10:
        try:
            return datetime.combine(date.fromisoformat(v.strip()), datetime.min.time())
        except ValueError:
            return v
    return v


class StudentCreate(BaseModel):
    """Schéma de création d'un élève (POST /api/students)."""
    model_config = INPUT_CONFIG

    first_name: str
    last_name: str
    student_id: str
    email: str
    major: Optional[str] = None
    enrollment_date: Optional[datetime] = None

    @field_validator("first_name", "last_name", "student_id")
    @classmethod
    def not_empty(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _strip_required(v).lower()

    @field_validator("major")
    @classmethod
    def blank_major_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("enrollment_date", mode="before")
    @classmethod
    def accept_plain_date(cls, v):
        return _parse_day(v)

    @field_validator("enrollment_date")
    @classmethod
    def enrollment_in_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_utc_naive(v)


class StudentUpdate(BaseModel):
    """
    Schéma de mise à jour partielle (PATCH /api/students/{id}).
    Seuls les champs présents dans le body sont appliqués ; un `null` explicite
    est refusé pour les champs obligatoires.
    """
    model_config = INPUT_CONFIG

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    student_id: Optional[str] = None
    email: Optional[str] = None
    major: Optional[str] = None
    enrollment_date: Optional[datetime] = None

    @field_validator("first_name", "last_name", "student_id")
    @classmethod
    def not_empty(cls, v: Optional[str]) -> str:
        return _strip_required(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> str:
        return _strip_required(v).lower()

    @field_validator("major")
    @classmethod
    def blank_major_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("enrollment_date", mode="before")
    @classmethod
    def accept_plain_date(cls, v):
        if v is None:
            raise ValueError("La date d'inscription ne peut pas être nulle.")
        return _parse_day(v)

    @field_validator("enrollment_date")
    @classmethod
    def enrollment_in_utc(cls, v: datetime) -> datetime:
        return _to_utc_naive(v)


class StudentResponse(BaseModel):
    """Schéma de réponse pour un élève."""
    id: uuid.UUID
    first_name: str
    last_name: str
    student_id: str
    email: str
    major: Optional[str]
    enrollment_date: datetime
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    @field_validator("enrollment_date", "created_at", "updated_at")
    @classmethod
    def as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class StudentDeleted(BaseModel):
    """Confirmation de suppression (DELETE /api/students/{id})."""
    message: str
    id: uuid.UUID


class StudentQuery(BaseModel):
    """
    Paramètres bruts du listage (GET /api/students).
    Les chaînes vides sont traitées comme absentes ; l'interprétation des dates
    et du tri est faite par le service.
    """
    search: Optional[str] = None
    major: Optional[str] = None
    enrollment_date_gte: Optional[str] = None
    enrollment_date_lte: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None

    @field_validator("*")
    @classmethod
    def empty_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class MajorCount(BaseModel):
    """Nombre d'élèves par filière (graphique en barres du client)."""
    major: Optional[str]
    count: int
