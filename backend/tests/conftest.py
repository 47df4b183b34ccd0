"""
Configuration partagée pour tous les tests.
La base pointe sur un SQLite en mémoire (défini avant tout import de l'app) :
les tables sont recréées pour chaque test.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.database import Base, SessionLocal, engine, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.student import Student  # noqa: E402


@pytest.fixture
def db():
    """Session sur une base vide."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """Client HTTP de test branché sur la session du test."""
    app.dependency_overrides[get_db] = lambda: db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def add_student(db):
    """Insère directement un élève en base et le retourne."""
    counter = {"n": 0}

    def _add(**kwargs) -> Student:
        counter["n"] += 1
        n = counter["n"]
        values = {
            "first_name": "Jean",
            "last_name": "Dupont",
            "student_id": f"S{n:04d}",
            "email": f"eleve{n}@school.be",
        }
        values.update(kwargs)
        student = Student(**values)
        db.add(student)
        db.commit()
        db.refresh(student)
        return student

    return _add
