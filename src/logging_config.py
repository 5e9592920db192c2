"""
Configuration du logging de l'application via loguru.

Tout est piloté par Settings :
- Console (stderr, colorée) au niveau CREDACCESS_LOG_LEVEL, ou DEBUG avec --verbose
- Fichier JSON avec rotation et rétention, qui capture tout à partir de DEBUG
- Avec CREDACCESS_DATABASE_ECHO, le SQL émis par SQLAlchemy passe par loguru
  au lieu d'être écrit sur stdout au milieu des tableaux Rich
"""

import logging
import sys

from loguru import logger

from .config import Settings

# Logger standard utilisé par SQLAlchemy pour journaliser le SQL émis
SQL_LOGGER_NAME = "sqlalchemy.engine"


class LoguruHandler(logging.Handler):
    """Redirige les enregistrements du logging standard vers loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(exception=record.exc_info).bind(source=record.name).log(
            level, record.getMessage()
        )


def route_sql_logging(enabled: bool) -> None:
    """Branche (ou débranche) le journal SQL de SQLAlchemy sur loguru."""
    sql_logger = logging.getLogger(SQL_LOGGER_NAME)
    for handler in list(sql_logger.handlers):
        if isinstance(handler, LoguruHandler):
            sql_logger.removeHandler(handler)

    if enabled:
        sql_logger.addHandler(LoguruHandler())
        sql_logger.setLevel(logging.INFO)
        sql_logger.propagate = False
    else:
        sql_logger.setLevel(logging.WARNING)
        sql_logger.propagate = True


def configure_logging(settings: Settings, verbose: bool = False) -> None:
    """Configure le logging de l'application.

    Args :
        settings : Paramètres de l'application (niveau, fichier, rotation, echo SQL)
        verbose : Force la console au niveau DEBUG

    La console reste sobre par défaut (WARNING) pour ne pas polluer les tableaux
    Rich ; le fichier capture tout à partir de DEBUG.
    """
    console_level = "DEBUG" if verbose else settings.log_level

    # Supprime les handlers déjà installés (dont celui par défaut)
    logger.remove()

    logger.add(
        sys.stderr,
        level=console_level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    settings.log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        settings.log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=settings.log_rotation_size,
        retention=settings.log_retention_count,
        compression="zip",
        enqueue=True,
    )

    route_sql_logging(settings.database_echo)

    logger.debug(
        "Logging configuré",
        console_level=console_level,
        log_file=str(settings.log_file),
        sql_echo=settings.database_echo,
    )
