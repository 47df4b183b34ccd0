"""
Tests unitaires du service élèves avec une session SQLAlchemy mockée :
chemins d'erreur difficiles à provoquer sur une vraie base.
"""

import uuid
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from app.exceptions import NotFoundError, UniquenessConflictError, ValidationError
from app.schemas.student import StudentCreate, StudentUpdate
from app.services.student_service import (
    create_student,
    delete_student,
    get_student,
    parse_student_id,
    update_student,
)


# --- Helpers ---

def make_student_mock(student_id=None):
    s = MagicMock()
    s.id = student_id or uuid.uuid4()
    return s


def make_db_mock(student=None, existing_id=None):
    """existing_id : valeur retournée par les requêtes de contrôle d'unicité."""
    db = MagicMock()
    db.get.return_value = student
    db.execute.return_value.scalar.return_value = existing_id
    return db


def new_student_data():
    return StudentCreate(first_name="Jean", last_name="Dupont", student_id="S1", email="jean@school.be")


# --- parse_student_id ---

def test_parse_student_id_valide():
    sid = uuid.uuid4()
    assert parse_student_id(str(sid)) == sid


def test_parse_student_id_invalide():
    with pytest.raises(ValidationError, match="identifiant"):
        parse_student_id("507f1f77bcf86cd799439011")


# --- create_student ---

def test_create_student_succes():
    db = make_db_mock()
    create_student(db, new_student_data())
    db.add.assert_called_once()
    db.commit.assert_called_once()


def test_create_student_conflit_detecte_avant_ecriture():
    db = make_db_mock(existing_id=uuid.uuid4())
    with pytest.raises(UniquenessConflictError) as exc:
        create_student(db, new_student_data())
    assert exc.value.fields == ["studentId", "email"]
    db.add.assert_not_called()
    db.commit.assert_not_called()


def test_create_student_conflit_au_commit_rollback():
    """Écriture concurrente : la base rejette le commit, la transaction est annulée."""
    db = make_db_mock()
    db.commit.side_effect = IntegrityError("duplicate", None, None)
    with pytest.raises(UniquenessConflictError, match="existe déjà"):
        create_student(db, new_student_data())
    db.rollback.assert_called_once()
    db.refresh.assert_not_called()


# --- get / update / delete ---

def test_get_student_inexistant():
    db = make_db_mock(student=None)
    with pytest.raises(NotFoundError):
        get_student(db, str(uuid.uuid4()))


def test_update_student_inexistant():
    db = make_db_mock(student=None)
    with pytest.raises(NotFoundError):
        update_student(db, str(uuid.uuid4()), StudentUpdate(first_name="Test"))
    db.commit.assert_not_called()


def test_update_student_applique_seulement_les_champs_fournis():
    student = make_student_mock()
    student.last_name = "Dupont"
    db = make_db_mock(student=student)

    update_student(db, str(student.id), StudentUpdate(first_name=" Marie "))

    assert student.first_name == "Marie"
    assert student.last_name == "Dupont"
    db.commit.assert_called_once()


def test_update_student_conflit_au_commit_rollback():
    student = make_student_mock()
    db = make_db_mock(student=student)
    db.commit.side_effect = IntegrityError("duplicate", None, None)
    with pytest.raises(UniquenessConflictError):
        update_student(db, str(student.id), StudentUpdate(email="autre@school.be"))
    db.rollback.assert_called_once()


def test_delete_student_inexistant():
    db = make_db_mock(student=None)
    with pytest.raises(NotFoundError):
        delete_student(db, str(uuid.uuid4()))
    db.delete.assert_not_called()


def test_delete_student_existant():
    student = make_student_mock()
    db = make_db_mock(student=student)
    assert delete_student(db, str(student.id)) == student.id
    db.delete.assert_called_once_with(student)
    db.commit.assert_called_once()
