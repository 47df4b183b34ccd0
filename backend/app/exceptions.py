"""
Exceptions métier de l'API.

Levées par les services, converties en réponse JSON par les handlers
enregistrés dans app.main :

    StudentRecordsError (base)
    ├── ValidationError          → 400 (paramètre ou identifiant mal formé)
    ├── UniquenessConflictError  → 400 (studentId ou email déjà utilisé)
    └── NotFoundError            → 404
"""

from typing import List, Optional


class StudentRecordsError(Exception):
    """Erreur de base : porte un message destiné au client et les champs concernés."""

    status_code = 500

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        self.message = message
        self.fields = list(fields or [])
        super().__init__(message)


class ValidationError(StudentRecordsError):
    status_code = 400


class UniquenessConflictError(StudentRecordsError):
    """Le champ `fields` contient les noms JSON en collision (studentId, email)."""

    status_code = 400


class NotFoundError(StudentRecordsError):
    status_code = 404
