"""
Configuration de la base de données pour credaccess.

Ce module fournit :
- Engine SQLAlchemy (SQLite par défaut, clés étrangères activées)
- Fournisseur de sessions (acquisition d'une connexion)
- Fonction d'initialisation des tables

La base de données est configurée via CREDACCESS_DATABASE_URL
(défaut: sqlite:///data/credaccess.db).
"""

from pathlib import Path
from typing import Optional

from loguru import logger
from sqlalchemy import Engine, event
from sqlalchemy.exc import ArgumentError
from sqlmodel import Session, SQLModel, create_engine

from src.core.exceptions import StoreConnectionError

# Engine global - initialisé lors du premier appel à get_engine()
_engine: Optional[Engine] = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite n'applique les clés étrangères que si le pragma est actif."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str) -> Engine:
    """
    Cree un engine pour l'URL donnée.

    Le SQL émis n'est pas écrit par l'engine lui-même : il passe par le
    logger standard sqlalchemy.engine, que configure_logging redirige vers
    loguru quand CREDACCESS_DATABASE_ECHO est actif.

    Args :
        database_url : URL SQLAlchemy (sqlite:///..., mysql+pymysql://...)

    Raises :
        StoreConnectionError : Si l'URL est vide ou invalide
    """
    if not database_url or not database_url.strip():
        raise StoreConnectionError("Configuration de la base de données vide ou invalide")

    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        # Creer le répertoire parent si l'URL est un fichier SQLite
        if database_url.startswith("sqlite:///") and ":memory:" not in database_url:
            db_path = Path(database_url.replace("sqlite:///", "", 1))
            db_path.parent.mkdir(exist_ok=True, parents=True)

    try:
        engine = create_engine(database_url, connect_args=connect_args)
    except ArgumentError as exc:
        raise StoreConnectionError(
            f"URL de base de données invalide : {database_url}"
        ) from exc

    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def get_engine() -> Engine:
    """
    Retourne l'engine global, en le créant si nécessaire.

    Utilise la configuration de l'application pour l'URL de la BDD.
    """
    global _engine
    if _engine is None:
        from src.config import Settings

        settings = Settings()
        _engine = build_engine(settings.database_url)
    return _engine


def create_session(engine: Optional[Engine] = None) -> Session:
    """
    Acquiert une nouvelle session (une connexion dédiée à l'unité de travail).

    La connexion physique n'est ouverte qu'au démarrage de la transaction
    (TransactionScope.begin), qui convertit les erreurs de connexion en
    StoreConnectionError.

    Args :
        engine : Engine à utiliser (défaut: engine global)
    """
    return Session(engine if engine is not None else get_engine())


def init_db(engine: Optional[Engine] = None) -> None:
    """
    Initialise la base de données en créant toutes les tables.

    Cette fonction importe les modèles pour enregistrer leurs métadonnées
    dans SQLModel.metadata, puis crée les tables correspondantes si elles
    n'existent pas déjà.

    Doit être appelée une fois au démarrage de l'application.
    """
    # Import des modèles pour enregistrer leurs métadonnées
    # L'import est fait ici pour éviter les imports circulaires
    from src.infrastructure.persistence import models  # noqa: F401

    target = engine if engine is not None else get_engine()
    SQLModel.metadata.create_all(target)
    logger.debug("Tables initialisées", url=str(target.url))
