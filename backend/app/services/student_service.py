"""
Service métier pour les élèves.
Traduit les paramètres de listage (recherche, filtres, tri) en requête SQLAlchemy
et gère le CRUD unitaire avec vérification des contraintes d'unicité.
"""

import uuid
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, UniquenessConflictError, ValidationError
from app.models.student import Student
from app.schemas.student import MajorCount, StudentCreate, StudentQuery, StudentUpdate

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"

# Champs JSON acceptés par sortBy → colonne
SORTABLE_FIELDS = {
    "id": Student.id,
    "firstName": Student.first_name,
    "lastName": Student.last_name,
    "studentId": Student.student_id,
    "email": Student.email,
    "major": Student.major,
    "enrollmentDate": Student.enrollment_date,
    "createdAt": Student.created_at,
    "updatedAt": Student.updated_at,
}

SEARCHABLE_COLUMNS = (
    Student.first_name,
    Student.last_name,
    Student.student_id,
    Student.email,
    Student.major,
)

# Colonnes soumises à unicité → nom JSON rapporté au client
UNIQUE_FIELDS = (
    ("student_id", "studentId"),
    ("email", "email"),
)


# --- Listage ---

def _parse_date_param(name: str, value: str) -> datetime:
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT)
    except ValueError:
        raise ValidationError(
            f"Format invalide pour {name}. Utiliser YYYY-MM-DD.", fields=[name]
        )


def build_filters(params: StudentQuery) -> list:
    """
    Construit les conditions WHERE (combinées en ET) à partir des paramètres.
    Lève une ValidationError si une borne de date est mal formée.
    """
    conditions = []

    if params.search:
        conditions.append(or_(*(
            column.icontains(params.search, autoescape=True)
            for column in SEARCHABLE_COLUMNS
        )))

    # Égalité stricte insensible à la casse (pas de motif, pas de jokers)
    if params.major:
        conditions.append(func.lower(Student.major) == func.lower(params.major))

    if params.enrollment_date_gte:
        start = _parse_date_param("enrollmentDate_gte", params.enrollment_date_gte)
        conditions.append(Student.enrollment_date >= start)

    if params.enrollment_date_lte:
        day = _parse_date_param("enrollmentDate_lte", params.enrollment_date_lte)
        # Borne inclusive : toute la journée jusqu'à 23:59:59.999 UTC
        end = day + timedelta(days=1) - timedelta(milliseconds=1)
        conditions.append(Student.enrollment_date <= end)

    return conditions


def build_ordering(params: StudentQuery) -> list:
    """Tri demandé, ou nom puis prénom croissants par défaut."""
    if not params.sort_by:
        return [Student.last_name.asc(), Student.first_name.asc()]

    column = SORTABLE_FIELDS.get(params.sort_by)
    if column is None:
        raise ValidationError(
            f"Champ de tri inconnu : {params.sort_by}. "
            f"Valeurs possibles : {', '.join(SORTABLE_FIELDS)}.",
            fields=["sortBy"],
        )
    return [column.desc() if params.sort_order == "desc" else column.asc()]


def list_students(db: Session, params: StudentQuery) -> list[Student]:
    """Retourne tous les élèves correspondant aux filtres, dans l'ordre demandé."""
    stmt = (
        select(Student)
        .where(*build_filters(params))
        .order_by(*build_ordering(params))
    )
    return list(db.execute(stmt).scalars().all())


def count_by_major(db: Session, params: StudentQuery) -> list[MajorCount]:
    """
    Compte les élèves par filière, en appliquant les mêmes filtres que le listage.
    Les élèves sans filière sont regroupés sous major=None.
    """
    count = func.count(Student.id)
    rows = db.execute(
        select(Student.major, count)
        .where(*build_filters(params))
        .group_by(Student.major)
        .order_by(count.desc(), Student.major.asc())
    ).all()
    return [MajorCount(major=major, count=n) for major, n in rows]


# --- CRUD unitaire ---

def parse_student_id(raw: str) -> uuid.UUID:
    """Valide le format de l'identifiant reçu dans l'URL."""
    try:
        return uuid.UUID(raw)
    except (TypeError, ValueError):
        raise ValidationError("Format d'identifiant d'élève invalide.", fields=["id"])


def _find_conflicts(db: Session, values: dict, exclude_id: Optional[uuid.UUID] = None) -> list[str]:
    """Retourne les champs JSON dont la valeur est déjà utilisée par un autre élève."""
    conflicts = []
    for attr, field_name in UNIQUE_FIELDS:
        if values.get(attr) is None:
            continue
        stmt = select(Student.id).where(getattr(Student, attr) == values[attr])
        if exclude_id is not None:
            stmt = stmt.where(Student.id != exclude_id)
        if db.execute(stmt.limit(1)).scalar() is not None:
            conflicts.append(field_name)
    return conflicts


def _commit_or_conflict(db: Session, values: dict, exclude_id: Optional[uuid.UUID], message: str) -> None:
    """
    Commit la transaction. Si la base rejette l'écriture (écriture concurrente
    sur une valeur unique), annule et lève UniquenessConflictError.
    """
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        fields = _find_conflicts(db, values, exclude_id) or [name for _, name in UNIQUE_FIELDS]
        logger.warning("Conflit d'unicité détecté au commit : %s", fields)
        raise UniquenessConflictError(message, fields=fields)


def create_student(db: Session, data: StudentCreate) -> Student:
    """
    Crée un élève.
    Lève UniquenessConflictError si studentId ou email existe déjà.
    """
    values = data.model_dump(exclude_none=True)
    message = "Un élève avec ce numéro d'étudiant ou cet email existe déjà."

    conflicts = _find_conflicts(db, values)
    if conflicts:
        logger.warning("Création refusée, champs déjà utilisés : %s", conflicts)
        raise UniquenessConflictError(message, fields=conflicts)

    student = Student(**values)
    db.add(student)
    _commit_or_conflict(db, values, None, message)
    db.refresh(student)

    logger.info("Élève créé : %s %s (%s)", student.first_name, student.last_name, student.id)
    return student


def get_student(db: Session, raw_id: str) -> Student:
    """Retourne un élève par son identifiant. Lève NotFoundError s'il n'existe pas."""
    student = db.get(Student, parse_student_id(raw_id))
    if student is None:
        raise NotFoundError("Élève introuvable.")
    return student


def update_student(db: Session, raw_id: str, data: StudentUpdate) -> Student:
    """
    Met à jour les champs fournis d'un élève. Les champs absents ne sont pas modifiés.
    L'unicité est vérifiée contre les autres élèves uniquement.
    """
    student = get_student(db, raw_id)
    update_data = data.model_dump(exclude_unset=True)
    message = "Mise à jour impossible : numéro d'étudiant ou email déjà utilisé par un autre élève."

    conflicts = _find_conflicts(db, update_data, exclude_id=student.id)
    if conflicts:
        logger.warning("Mise à jour de %s refusée, champs déjà utilisés : %s", student.id, conflicts)
        raise UniquenessConflictError(message, fields=conflicts)

    for field, value in update_data.items():
        setattr(student, field, value)

    _commit_or_conflict(db, update_data, student.id, message)
    db.refresh(student)

    logger.info("Élève mis à jour : %s (%s)", student.id, ", ".join(update_data) or "aucun champ")
    return student


def delete_student(db: Session, raw_id: str) -> uuid.UUID:
    """Supprime définitivement un élève et retourne son identifiant."""
    student = get_student(db, raw_id)
    student_id = student.id
    db.delete(student)
    db.commit()
    logger.info("Élève supprimé : %s", student_id)
    return student_id
