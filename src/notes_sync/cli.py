from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional, TypeVar

import typer

from notes_sync.auth import auth_state
from notes_sync.config import AuthTransport, ClientSettings
from notes_sync.display import build_changes_render, print_notes, print_status
from notes_sync.logging import console, get_logger, set_level
from notes_sync.session import MemorySessionStore, SessionStore
from notes_sync.sync import ViewSynchronizer, build_view
from notes_sync.tags import parse_tags

T = TypeVar("T")

app = typer.Typer(
    name="notes",
    add_completion=True,
    no_args_is_help=True,
    help="Notes: list, write, pin and delete notes on a remote notes service.",
)

log = get_logger("notes_sync.cli")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs."),
    api_url: Optional[str] = typer.Option(None, "--api-url", envvar="NOTES_API_URL", help="Service base URL."),
    auth_transport: Optional[AuthTransport] = typer.Option(
        None, "--auth-transport", help="Send the session token as a 'header' or in the 'body'."
    ),
    session_file: Optional[Path] = typer.Option(None, "--session-file", help="Where the session token is kept."),
    no_persist: bool = typer.Option(False, "--no-persist", help="Keep the session in memory only."),
) -> None:
    if verbose:
        set_level(logging.DEBUG)
    settings = ClientSettings.from_env(
        base_url=api_url,
        auth_transport=auth_transport,
        session_path=session_file,
    )
    session = MemorySessionStore() if no_persist else SessionStore(settings.session_path)
    log.debug(f"Using {settings.base_url} with {settings.auth_transport.value} auth")
    # a caller may preset obj with an httpx transport to talk to
    preset = ctx.obj if isinstance(ctx.obj, dict) else {}
    ctx.obj = {"settings": settings, "session": session, "transport": preset.get("transport")}


def _open_view(ctx: typer.Context) -> ViewSynchronizer:
    return build_view(ctx.obj["settings"], ctx.obj["session"], transport=ctx.obj["transport"])


def _run(ctx: typer.Context, action: Callable[[ViewSynchronizer], Awaitable[T]], show_notes: bool = True) -> T:
    async def runner() -> T:
        view = _open_view(ctx)
        try:
            result = await action(view)
        finally:
            await view.aclose()
        if show_notes and not view.status.is_error:
            print_notes(view.notes)
        print_status(view.status)
        if view.status.is_error:
            raise typer.Exit(1)
        return result

    return asyncio.run(runner())


@app.command("list")
def list_cmd(ctx: typer.Context) -> None:
    """Show every note on the server."""
    _run(ctx, lambda view: view.refresh())


@app.command("add")
def add_cmd(
    ctx: typer.Context,
    content: str = typer.Argument(..., help="Note text."),
    tags: str = typer.Option("", "--tags", "-t", help="Comma separated tags."),
    pinned: bool = typer.Option(False, "--pinned", "-p", help="Pin the new note."),
) -> None:
    """Create a note."""
    _run(ctx, lambda view: view.create(content, pinned, parse_tags(tags)))


@app.command("pin")
def pin_cmd(ctx: typer.Context, note_id: str = typer.Argument(..., help="Note ID.")) -> None:
    """Pin a note."""
    _run(ctx, lambda view: view.set_pinned(note_id, True))


@app.command("unpin")
def unpin_cmd(ctx: typer.Context, note_id: str = typer.Argument(..., help="Note ID.")) -> None:
    """Unpin a note."""
    _run(ctx, lambda view: view.set_pinned(note_id, False))


@app.command("edit")
def edit_cmd(
    ctx: typer.Context,
    note_id: str = typer.Argument(..., help="Note ID."),
    content: str = typer.Argument(..., help="New note text."),
    tags: str = typer.Option("", "--tags", "-t", help="Comma separated tags; replaces the old ones."),
) -> None:
    """Replace the content and tags of a note."""
    _run(ctx, lambda view: view.edit(note_id, content, parse_tags(tags)))


@app.command("rm")
def rm_cmd(ctx: typer.Context, note_id: str = typer.Argument(..., help="Note ID.")) -> None:
    """Delete a note."""
    _run(ctx, lambda view: view.delete(note_id))


@app.command("changes")
def changes_cmd(ctx: typer.Context, note_id: str = typer.Argument(..., help="Note ID.")) -> None:
    """Show the change history the server keeps for a note."""
    text = _run(ctx, lambda view: view.changes(note_id), show_notes=False)
    if text is not None:
        console().print(build_changes_render(note_id, text))


@app.command("signup")
def signup_cmd(
    ctx: typer.Context,
    username: str = typer.Option(..., "--username", "-u", prompt=True, help="Account name."),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True, help="Account password."),
) -> None:
    """Create an account and sign in with it."""
    _run(ctx, lambda view: view.signup(username, password))


@app.command("signin")
def signin_cmd(
    ctx: typer.Context,
    username: str = typer.Option(..., "--username", "-u", prompt=True, help="Account name."),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True, help="Account password."),
) -> None:
    """Sign in and keep the session token for later commands."""
    _run(ctx, lambda view: view.signin(username, password))


@app.command("signout")
def signout_cmd(ctx: typer.Context) -> None:
    """Forget the session token."""
    _run(ctx, lambda view: view.signout())


@app.command("whoami")
def whoami_cmd(ctx: typer.Context) -> None:
    """Show whether a session token is held."""
    state = auth_state(ctx.obj["session"])
    base_url = ctx.obj["settings"].base_url
    console().print(f"[green]{state.value}[/green] · {base_url}")


@app.command("health")
def health_cmd(ctx: typer.Context) -> None:
    """Check that the service answers."""
    base_url = ctx.obj["settings"].base_url

    async def probe() -> bool:
        view = _open_view(ctx)
        try:
            return await view.client.health()
        finally:
            await view.aclose()

    if asyncio.run(probe()):
        console().print(f"[green]ok[/green] · {base_url}")
    else:
        console().print(f"[red]Error:[/red] {base_url} is not answering")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
