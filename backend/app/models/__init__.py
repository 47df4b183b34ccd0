# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant create_all (appelé par init_db au démarrage).

from app.models.student import Student  # noqa: F401
