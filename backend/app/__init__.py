"""API de gestion des dossiers élèves."""
