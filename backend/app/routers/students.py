"""
Router pour les élèves.
Listage avec recherche, filtres et tri (GET /api/students)
Statistiques par filière (GET /api/students/stats/majors)
Création (POST /api/students)
Lecture (GET /api/students/{id})
Mise à jour partielle (PATCH /api/students/{id})
Suppression (DELETE /api/students/{id})

Les erreurs métier (app.exceptions) sont converties en réponses par les
handlers enregistrés dans app.main.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.student import (
    MajorCount,
    StudentCreate,
    StudentDeleted,
    StudentQuery,
    StudentResponse,
    StudentUpdate,
)
from app.services import student_service

router = APIRouter(prefix="/api/students", tags=["Élèves"])


def student_query(
    search: Optional[str] = Query(None, description="Sous-chaîne recherchée (nom, prénom, numéro, email, filière)"),
    major: Optional[str] = Query(None, description="Filière exacte, insensible à la casse"),
    enrollment_date_gte: Optional[str] = Query(None, alias="enrollmentDate_gte", description="YYYY-MM-DD"),
    enrollment_date_lte: Optional[str] = Query(None, alias="enrollmentDate_lte", description="YYYY-MM-DD"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc (défaut) ou desc"),
) -> StudentQuery:
    """Dépendance : regroupe les paramètres de listage dans un StudentQuery."""
    return StudentQuery(
        search=search,
        major=major,
        enrollment_date_gte=enrollment_date_gte,
        enrollment_date_lte=enrollment_date_lte,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("", response_model=List[StudentResponse], summary="Lister les élèves")
def list_students(params: StudentQuery = Depends(student_query), db: Session = Depends(get_db)):
    """
    Retourne tous les élèves correspondant aux filtres (sans pagination).
    Tri par défaut : nom puis prénom, croissant.
    """
    return student_service.list_students(db, params)


@router.get("/stats/majors", response_model=List[MajorCount], summary="Nombre d'élèves par filière")
def students_by_major(params: StudentQuery = Depends(student_query), db: Session = Depends(get_db)):
    """Alimente le graphique en barres ; mêmes filtres que le listage, tri ignoré."""
    return student_service.count_by_major(db, params)


@router.post("", response_model=StudentResponse, status_code=201, summary="Créer un élève")
def create_student(data: StudentCreate, db: Session = Depends(get_db)):
    return student_service.create_student(db, data)


@router.get("/{student_id}", response_model=StudentResponse, summary="Détail d'un élève")
def get_student(student_id: str, db: Session = Depends(get_db)):
    return student_service.get_student(db, student_id)


@router.patch("/{student_id}", response_model=StudentResponse, summary="Modifier un élève")
def update_student(student_id: str, data: StudentUpdate, db: Session = Depends(get_db)):
    """Met à jour les champs fournis d'un élève. Les champs absents ne sont pas modifiés."""
    return student_service.update_student(db, student_id, data)


@router.delete("/{student_id}", response_model=StudentDeleted, summary="Supprimer un élève")
def delete_student(student_id: str, db: Session = Depends(get_db)):
    """Supprime définitivement un élève."""
    deleted_id = student_service.delete_student(db, student_id)
    return StudentDeleted(message="Élève supprimé.", id=deleted_id)
