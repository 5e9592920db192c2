"""
Taxonomie des erreurs métier de credaccess.

Toutes les erreurs levées par les stores et les services héritent de
CredAccessError, ce qui permet à la couche de présentation (CLI) de les
intercepter commande par commande sans jamais faire tomber le processus.

- InvalidArgumentError : entrée mal formée ou hors bornes (faute de l'appelant)
- NotFoundError : entité absente ou déjà supprimée logiquement
- ConflictError : violation d'unicité ou de sécurité référentielle
- PersistenceError : échec inattendu du stockage
- StoreConnectionError : impossible d'acquérir une connexion
- TransactionStateError : transition illégale du coordinateur de transaction
"""


class CredAccessError(Exception):
    """Erreur de base de l'application."""

    def rewrap(self, message: str) -> "CredAccessError":
        """
        Cree une erreur de même classe avec un message contextualisé.

        L'appelant chaîne l'erreur d'origine avec `raise ... from exc`.
        """
        return type(self)(f"{message} : {self}")


class InvalidArgumentError(CredAccessError, ValueError):
    """Argument invalide (id <= 0, champ vide, longueur dépassée...)."""


class NotFoundError(CredAccessError):
    """L'entité référencée n'existe pas ou est supprimée logiquement."""


class ConflictError(CredAccessError):
    """Violation d'unicité (username, email) ou de sécurité référentielle."""


class PersistenceError(CredAccessError):
    """Echec inattendu de la base de données."""


class StoreConnectionError(CredAccessError):
    """Configuration invalide ou base de données injoignable."""


class TransactionStateError(CredAccessError):
    """Opération appelée dans un état de transaction qui ne la permet pas."""
