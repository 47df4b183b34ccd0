"""
Configuration de la connexion à la base de données.
Le moteur est créé une seule fois pour tout le processus ; chaque requête
emprunte une session via la dépendance get_db.
"""

import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import settings

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    """Options propres à SQLite (dev/tests) : une seule connexion partagée entre threads."""
    if not url.startswith("sqlite"):
        return {}
    options = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        options["poolclass"] = StaticPool
    return options


engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))


@event.listens_for(engine, "connect")
def _sqlite_unicode_lower(dbapi_connection, connection_record):
    """Le lower() natif de SQLite ne replie que l'ASCII : remplacé par str.lower."""
    if engine.dialect.name != "sqlite":
        return
    dbapi_connection.create_function(
        "lower", 1, lambda value: value.lower() if isinstance(value, str) else value, deterministic=True,
    )


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dépendance FastAPI — fournit une session BDD et la ferme après usage."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """
    Vérifie que la base est joignable et crée les tables manquantes.
    Appelé au démarrage : une erreur ici est fatale pour le processus.
    """
    import app.models  # noqa: F401 — enregistre les modèles dans Base.metadata

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as exc:
        logger.critical("Base de données injoignable (%s) : %s", engine.url.render_as_string(), exc)
        raise
    logger.info("Connecté à la base de données (%s).", engine.url.get_backend_name())
