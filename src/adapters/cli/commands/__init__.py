"""Sous-package CLI commands - re-exporte les commandes publiques."""

from src.adapters.cli.commands.user_commands import (
    user_create,
    user_delete,
    user_find,
    user_list,
    user_restore,
    user_secret,
    user_update,
)
from src.adapters.cli.commands.credential_commands import (
    cred_create,
    cred_delete,
    cred_list,
    cred_restore,
    cred_show,
    cred_update,
    cred_verify,
)

__all__ = [
    # utilisateurs
    "user_create",
    "user_list",
    "user_find",
    "user_update",
    "user_delete",
    "user_restore",
    "user_secret",
    # credentials
    "cred_create",
    "cred_list",
    "cred_show",
    "cred_update",
    "cred_delete",
    "cred_restore",
    "cred_verify",
]
