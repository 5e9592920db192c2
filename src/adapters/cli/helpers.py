"""
Utilitaires partages pour les commandes CLI de credaccess.

Ce module fournit :
- console : instance Rich Console partagée
- build_container : container DI initialisé (tables créées)
- handle_errors : context manager convertissant les erreurs métier en message
- render_users / render_credentials : affichage tabulaire Rich
- prompt_secret : saisie masquée d'un secret avec confirmation
"""

from contextlib import contextmanager
from typing import Iterable, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from src.container import Container
from src.core.entities.user import Credential, User
from src.core.exceptions import CredAccessError

console = Console()

DATE_FORMAT = "%Y-%m-%d %H:%M"


def build_container() -> Container:
    """Cree le container et initialise la base de données."""
    container = Container()
    container.database.init()
    return container


@contextmanager
def handle_errors(soft: bool = False):
    """
    Intercepte les erreurs métier d'une commande.

    Une erreur n'arrête jamais le processus brutalement : elle est affichée
    puis la commande sort avec le code 1. En mode soft (restaurations), elle
    est affichée comme un simple avertissement et la commande réussit.

    Usage:
        with handle_errors():
            service.delete(user_id)
    """
    try:
        yield
    except CredAccessError as exc:
        logger.debug(f"Erreur métier interceptée par la CLI : {exc!r}")
        if soft:
            console.print(f"[yellow]Avertissement : {exc}[/yellow]")
            return
        console.print(f"[red]Erreur : {exc}[/red]")
        raise typer.Exit(1) from exc


def prompt_secret(label: str = "Secret") -> str:
    """Saisie masquée avec confirmation."""
    return typer.prompt(label, hide_input=True, confirmation_prompt=True)


def _format_date(value) -> str:
    return value.strftime(DATE_FORMAT) if value else "-"


def _yes_no(value: bool) -> str:
    return "[green]oui[/green]" if value else "non"


def render_users(users: Iterable[User], title: str = "Utilisateurs") -> None:
    """Affiche une liste d'utilisateurs."""
    table = Table(title=title)
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Username")
    table.add_column("Email")
    table.add_column("Actif")
    table.add_column("Inscrit le")
    table.add_column("Credential", justify="right")
    table.add_column("Reset requis")

    for user in users:
        credential = user.credential
        table.add_row(
            str(user.id),
            user.username,
            user.email,
            _yes_no(user.active),
            _format_date(user.registered_at),
            str(credential.id) if credential else "-",
            _yes_no(credential.requires_reset) if credential else "-",
        )
    console.print(table)


def render_user(user: Optional[User]) -> None:
    """Affiche un utilisateur ou un message d'absence."""
    if user is None:
        console.print("[yellow]Aucun utilisateur trouvé.[/yellow]")
        return
    render_users([user], title=f"Utilisateur {user.id}")


def render_credentials(credentials: Iterable[Credential], title: str = "Credentials") -> None:
    """Affiche une liste de credentials (jamais le secret)."""
    table = Table(title=title)
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Dernier changement")
    table.add_column("Reset requis")

    for credential in credentials:
        table.add_row(
            str(credential.id),
            _format_date(credential.last_changed),
            _yes_no(credential.requires_reset),
        )
    console.print(table)
