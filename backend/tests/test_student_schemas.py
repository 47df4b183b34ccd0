"""
Tests des schémas Pydantic : normalisation et rejet des entrées invalides.
"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from app.schemas.student import StudentCreate, StudentQuery, StudentUpdate


def test_create_alias_camel_case():
    s = StudentCreate.model_validate({
        "firstName": "Jean", "lastName": "Dupont", "studentId": "S1", "email": "j@school.be",
    })
    assert s.first_name == "Jean"
    assert s.student_id == "S1"


def test_create_date_avec_fuseau_convertie_en_utc():
    s = StudentCreate(
        first_name="Jean", last_name="Dupont", student_id="S1", email="j@school.be",
        enrollment_date="2024-01-31T23:30:00-02:00",
    )
    assert s.enrollment_date == datetime(2024, 2, 1, 1, 30)
    assert s.enrollment_date.tzinfo is None


def test_create_date_invalide_rejetee():
    with pytest.raises(ValidationError):
        StudentCreate(
            first_name="Jean", last_name="Dupont", student_id="S1", email="j@school.be",
            enrollment_date="2024-13-45",
        )


def test_create_numero_vide_rejete():
    with pytest.raises(ValidationError):
        StudentCreate(first_name="Jean", last_name="Dupont", student_id="  ", email="j@school.be")


def test_update_vide_ne_modifie_rien():
    assert StudentUpdate().model_dump(exclude_unset=True) == {}


def test_update_date_nulle_rejetee():
    with pytest.raises(ValidationError):
        StudentUpdate(enrollment_date=None)


def test_query_chaines_vides_absentes():
    q = StudentQuery(search="", major="", sort_by="")
    assert q.search is None
    assert q.major is None
    assert q.sort_by is None
