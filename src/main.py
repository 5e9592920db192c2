"""
Point d'entrée CLI de credaccess.

Configure le logging, initialise la base et fournit les commandes CLI
de gestion des utilisateurs et de leurs credentials d'accès.
"""

from typing import Annotated

import typer
from loguru import logger

from .adapters.cli.commands import (
    cred_create,
    cred_delete,
    cred_list,
    cred_restore,
    cred_show,
    cred_update,
    cred_verify,
    user_create,
    user_delete,
    user_find,
    user_list,
    user_restore,
    user_secret,
    user_update,
)
from .config import Settings
from .logging_config import configure_logging

__version__ = "0.1.0"

app = typer.Typer(
    name="credaccess",
    help="Gestion des utilisateurs et de leurs credentials d'accès",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Afficher les logs INFO et DEBUG")
    ] = False,
) -> None:
    """credaccess - utilisateurs et credentials d'accès."""
    if verbose:
        configure_logging(Settings(), verbose=True)


# Utilisateurs
app.command(name="user-create")(user_create)
app.command(name="user-list")(user_list)
app.command(name="user-find")(user_find)
app.command(name="user-update")(user_update)
app.command(name="user-delete")(user_delete)
app.command(name="user-restore")(user_restore)
app.command(name="user-secret")(user_secret)

# Credentials
app.command(name="cred-create")(cred_create)
app.command(name="cred-list")(cred_list)
app.command(name="cred-show")(cred_show)
app.command(name="cred-update")(cred_update)
app.command(name="cred-delete")(cred_delete)
app.command(name="cred-restore")(cred_restore)
app.command(name="cred-verify")(cred_verify)


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = Settings()
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(f"Niveau de log : {config.log_level}")
    typer.echo(f"Fichier de log : {config.log_file}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"credaccess v{__version__}")


def main() -> None:
    """Point d'entrée de l'application."""
    configure_logging(Settings())
    logger.info("Démarrage de credaccess", version=__version__)

    app()


if __name__ == "__main__":
    main()
