"""
Commandes CLI de gestion des utilisateurs (user-create, user-list, user-find,
user-update, user-delete, user-restore, user-secret).
"""

from typing import Annotated, Optional

import typer

from src.adapters.cli.helpers import (
    build_container,
    console,
    handle_errors,
    prompt_secret,
    render_user,
    render_users,
)
from src.core.entities.user import Credential, User


def user_create(
    username: Annotated[str, typer.Option(prompt=True, help="Nom d'utilisateur (30 car. max)")],
    email: Annotated[str, typer.Option(prompt=True, help="Email (120 car. max)")],
    secret: Annotated[
        str,
        typer.Option(
            prompt=True,
            hide_input=True,
            confirmation_prompt=True,
            help="Secret de connexion (jamais stocké en clair)",
        ),
    ],
    active: Annotated[bool, typer.Option("--active", help="Compte actif des la création")] = False,
    require_reset: Annotated[
        bool, typer.Option("--require-reset", help="Forcer le changement du secret")
    ] = False,
) -> None:
    """Cree un utilisateur et sa credential (transaction unique)."""
    service = build_container().user_service()
    user = User(
        username=username,
        email=email,
        active=active,
        credential=Credential.from_plaintext(secret, requires_reset=require_reset),
    )
    with handle_errors():
        service.create(user)
        console.print(
            f"[green]Utilisateur créé :[/green] {user.username} "
            f"(id={user.id}, credential={user.credential.id})"
        )


def user_list() -> None:
    """Liste les utilisateurs non supprimés."""
    service = build_container().user_service()
    with handle_errors():
        users = service.get_all()
        if not users:
            console.print("[yellow]Aucun utilisateur.[/yellow]")
            return
        render_users(users, title=f"Utilisateurs ({len(users)})")


def user_find(
    user_id: Annotated[Optional[int], typer.Option("--id", help="ID de l'utilisateur")] = None,
    username: Annotated[Optional[str], typer.Option(help="Username exact")] = None,
    email: Annotated[Optional[str], typer.Option(help="Email exact")] = None,
) -> None:
    """
    Recherche un utilisateur par ID, username ou email.

    Exemples:
      credaccess user-find --id 3
      credaccess user-find --username ana
      credaccess user-find --email ana@x.com
    """
    if user_id is None and username is None and email is None:
        console.print("[red]Erreur : indiquer --id, --username ou --email[/red]")
        raise typer.Exit(1)

    service = build_container().user_service()
    with handle_errors():
        if user_id is not None:
            user = service.get_by_id(user_id)
        elif username is not None:
            user = service.find_by_username(username)
        else:
            user = service.find_by_email(email)
        render_user(user)


def user_update(
    user_id: Annotated[int, typer.Argument(help="ID de l'utilisateur")],
    username: Annotated[Optional[str], typer.Option(help="Nouveau username")] = None,
    email: Annotated[Optional[str], typer.Option(help="Nouvel email")] = None,
    active: Annotated[
        Optional[bool], typer.Option("--active/--inactive", help="État du compte")
    ] = None,
    change_secret: Annotated[
        bool, typer.Option("--change-secret", help="Saisir un nouveau secret")
    ] = False,
    require_reset: Annotated[
        Optional[bool],
        typer.Option("--require-reset/--no-require-reset", help="Drapeau de réinitialisation"),
    ] = None,
) -> None:
    """Met à jour un utilisateur (et sa credential si le secret change)."""
    service = build_container().user_service()
    with handle_errors():
        user = service.get_by_id(user_id)
        if user is None:
            console.print(f"[red]Erreur : aucun utilisateur avec l'ID {user_id}[/red]")
            raise typer.Exit(1)

        if username is not None:
            user.username = username
        if email is not None:
            user.email = email
        if active is not None:
            user.active = active
        if user.credential is not None:
            if change_secret:
                user.credential.rotate(prompt_secret("Nouveau secret"))
            if require_reset is not None:
                user.credential.requires_reset = require_reset

        service.update(user)
        console.print(f"[green]Utilisateur mis à jour :[/green] {user.username} (id={user.id})")


def user_delete(
    user_id: Annotated[int, typer.Argument(help="ID de l'utilisateur")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Ne pas demander confirmation")] = False,
) -> None:
    """Supprime logiquement un utilisateur et sa credential."""
    if not yes and not typer.confirm(f"Supprimer l'utilisateur {user_id} ?"):
        console.print("Suppression annulée.")
        return

    service = build_container().user_service()
    with handle_errors():
        service.delete(user_id)
        console.print(f"[green]Utilisateur {user_id} supprimé.[/green]")


def user_restore(
    user_id: Annotated[int, typer.Argument(help="ID de l'utilisateur")],
) -> None:
    """Restaure un utilisateur supprimé et sa credential (échec non bloquant)."""
    service = build_container().user_service()
    with handle_errors(soft=True):
        user = service.restore(user_id)
        console.print(f"[green]Utilisateur restauré :[/green] {user.username} (id={user.id})")


def user_secret(
    user_id: Annotated[int, typer.Argument(help="ID de l'utilisateur")],
    require_reset: Annotated[
        bool, typer.Option("--require-reset", help="Forcer un nouveau changement ensuite")
    ] = False,
) -> None:
    """Change le secret de la credential d'un utilisateur."""
    service = build_container().user_service()
    secret = prompt_secret("Nouveau secret")
    with handle_errors():
        credential = service.change_secret(user_id, secret, requires_reset=require_reset)
        console.print(
            f"[green]Secret changé[/green] pour l'utilisateur {user_id} "
            f"(credential={credential.id})"
        )
