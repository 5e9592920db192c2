"""
Portee transactionnelle des cas d'utilisation.

Ouvre une unité de travail, la démarre, la valide en fin de bloc et, en cas
d'erreur, laisse le TransactionScope annuler avant de relancer une erreur
de même catégorie avec un message contextualisé (cause d'origine chaînée).
"""

from contextlib import contextmanager
from typing import Callable, Iterator

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.core.exceptions import ConflictError, CredAccessError, PersistenceError
from src.infrastructure.persistence.transaction import TransactionScope


@contextmanager
def transactional(
    scope_factory: Callable[[], TransactionScope], action: str
) -> Iterator[TransactionScope]:
    """
    Execute le bloc dans une transaction dédiée.

    Usage:
        with transactional(scope_factory, "la suppression de l'utilisateur") as tx:
            user_repo.soft_delete(user_id, tx)

    Args:
        scope_factory: Fabrique de TransactionScope (une session neuve par appel)
        action: Description de l'opération pour les messages d'erreur

    Raises:
        CredAccessError: Même classe que l'erreur d'origine, message enrichi
        ConflictError: Contrainte d'unicité ou d'intégrité violée en base
        PersistenceError: Pour toute erreur SQLAlchemy non convertie
    """
    try:
        with scope_factory() as tx:
            tx.begin()
            yield tx
            tx.commit()
    except CredAccessError as exc:
        logger.warning(f"Echec de {action} : {exc}")
        raise exc.rewrap(f"Erreur transactionnelle lors de {action}") from exc
    except IntegrityError as exc:
        logger.warning(f"Echec de {action} : {exc}")
        raise ConflictError(f"Erreur transactionnelle lors de {action} : {exc.orig}") from exc
    except SQLAlchemyError as exc:
        logger.warning(f"Echec de {action} : {exc}")
        raise PersistenceError(f"Erreur transactionnelle lors de {action} : {exc}") from exc
