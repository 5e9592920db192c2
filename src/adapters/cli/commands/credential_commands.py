"""
Commandes CLI de gestion directe des credentials (cred-create, cred-list,
cred-show, cred-update, cred-delete, cred-restore, cred-verify).
"""

from typing import Annotated, Optional

import typer

from src.adapters.cli.helpers import (
    build_container,
    console,
    handle_errors,
    prompt_secret,
    render_credentials,
)
from src.core.entities.user import Credential


def cred_create(
    secret: Annotated[
        str,
        typer.Option(prompt=True, hide_input=True, confirmation_prompt=True, help="Secret"),
    ],
    require_reset: Annotated[
        bool, typer.Option("--require-reset", help="Forcer le changement du secret")
    ] = False,
) -> None:
    """Cree une credential isolée (non rattachée à un utilisateur)."""
    service = build_container().credential_service()
    credential = Credential.from_plaintext(secret, requires_reset=require_reset)
    with handle_errors():
        service.create(credential)
        console.print(f"[green]Credential créée[/green] (id={credential.id})")


def cred_list() -> None:
    """Liste les credentials non supprimées."""
    service = build_container().credential_service()
    with handle_errors():
        credentials = service.get_all()
        if not credentials:
            console.print("[yellow]Aucune credential.[/yellow]")
            return
        render_credentials(credentials, title=f"Credentials ({len(credentials)})")


def cred_show(
    credential_id: Annotated[int, typer.Argument(help="ID de la credential")],
) -> None:
    """Affiche une credential par son ID."""
    service = build_container().credential_service()
    with handle_errors():
        credential = service.get_by_id(credential_id)
        if credential is None:
            console.print("[yellow]Aucune credential trouvée.[/yellow]")
            return
        render_credentials([credential], title=f"Credential {credential_id}")


def cred_update(
    credential_id: Annotated[int, typer.Argument(help="ID de la credential")],
    change_secret: Annotated[
        bool, typer.Option("--change-secret", help="Saisir un nouveau secret")
    ] = False,
    require_reset: Annotated[
        Optional[bool],
        typer.Option("--require-reset/--no-require-reset", help="Drapeau de réinitialisation"),
    ] = None,
) -> None:
    """Met à jour une credential (secret et/ou drapeau de réinitialisation)."""
    service = build_container().credential_service()
    with handle_errors():
        credential = service.get_by_id(credential_id)
        if credential is None:
            console.print(f"[red]Erreur : aucune credential avec l'ID {credential_id}[/red]")
            raise typer.Exit(1)

        if change_secret:
            credential.rotate(prompt_secret("Nouveau secret"))
        if require_reset is not None:
            credential.requires_reset = require_reset

        service.update(credential)
        console.print(f"[green]Credential {credential_id} mise à jour.[/green]")


def cred_delete(
    credential_id: Annotated[int, typer.Argument(help="ID de la credential")],
) -> None:
    """Supprime logiquement une credential qui n'est plus utilisée."""
    service = build_container().credential_service()
    with handle_errors():
        service.delete(credential_id)
        console.print(f"[green]Credential {credential_id} supprimée.[/green]")


def cred_restore(
    credential_id: Annotated[int, typer.Argument(help="ID de la credential")],
) -> None:
    """Restaure une credential supprimée (échec non bloquant)."""
    service = build_container().credential_service()
    with handle_errors(soft=True):
        service.restore(credential_id)
        console.print(f"[green]Credential {credential_id} restaurée.[/green]")


def cred_verify(
    credential_id: Annotated[int, typer.Argument(help="ID de la credential")],
    secret: Annotated[str, typer.Option(prompt=True, hide_input=True, help="Secret à vérifier")],
) -> None:
    """Verifie qu'un secret correspond à la credential stockée."""
    service = build_container().credential_service()
    with handle_errors():
        if service.verify(credential_id, secret):
            console.print("[green]Secret valide.[/green]")
        else:
            console.print("[red]Secret invalide.[/red]")
            raise typer.Exit(1)
