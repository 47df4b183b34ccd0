"""
Point d'entrée processus : python -m app
Configure les logs puis lance uvicorn sur HOST:PORT.
Si la base est injoignable au démarrage, uvicorn s'arrête avec un code non nul.
"""

import uvicorn

from app.config import settings
from app.logging_config import setup_logging


def main() -> None:
    setup_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
