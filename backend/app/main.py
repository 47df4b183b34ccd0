"""
Point d'entrée principal de l'API de gestion des élèves.
Démarrage : python -m app  (ou uvicorn app.main:app --reload)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.database import init_db
from app.exceptions import StudentRecordsError
from app.routers import students

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie : la base doit être joignable avant de servir du trafic."""
    init_db()
    yield


app = FastAPI(
    title="Student Records API",
    description="API de gestion des dossiers élèves (recherche, filtres, tri, CRUD)",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS — client navigateur (origines configurables via CORS_ORIGIN_REGEX).
app.add_middleware(
    CORSMiddleware,
    allow_origins=[],
    allow_origin_regex=settings.CORS_ORIGIN_REGEX,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept"],
)


app.include_router(students.router)


def _error_response(status_code: int, message: str, fields: list) -> JSONResponse:
    content = {"detail": message}
    if fields:
        content["fields"] = fields
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(StudentRecordsError)
async def student_records_error_handler(request: Request, exc: StudentRecordsError) -> JSONResponse:
    """Erreurs métier levées par les services (400/404)."""
    return _error_response(exc.status_code, exc.message, exc.fields)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Body ou paramètres invalides (champ manquant, inconnu, vide ou mal typé) → 400.
    Le message reprend la première erreur ; `fields` liste tous les champs en cause.
    """
    errors = exc.errors()
    fields = []
    for error in errors:
        # loc = ("body", "firstName") ; ("body",) si le body est absent ;
        # ("body", 12) si le JSON est mal formé (position de l'erreur)
        parts = [part for part in error["loc"][1:] if isinstance(part, str)]
        name = ".".join(parts) or str(error["loc"][0])
        if name not in fields:
            fields.append(name)
    first = errors[0] if errors else {"msg": "Requête invalide."}
    message = f"{fields[0]} : {first['msg']}" if fields else first["msg"]
    return _error_response(400, message, fields)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Erreur base de données : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Une erreur interne est survenue."},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour garantir que la réponse 500
    passe bien par CORSMiddleware (qui injecte les headers CORS).
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Une erreur interne est survenue."},
    )


@app.get("/", include_in_schema=False)
def root():
    return {"message": "Student Records API"}


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "Student Records API", "version": "0.1.0"}
