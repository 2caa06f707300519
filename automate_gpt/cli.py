"""Command line interface for running automate-gpt workflows."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from .auth import AccountStore
from .constants import SUPPORTED_MODELS
from .contracts import AppSettings
from .errors import AutomateGPTError
from .execute import create_executor
from .extract import read_file_text
from .persistence import HistoryStore, KeyValueStore, get_store
from .registry import list_templates

app = typer.Typer(help="CLI for automate-gpt workflows")

# Command groups
workflow_app = typer.Typer(help="Commands for browsing workflows")
history_app = typer.Typer(help="Commands for managing result history")
settings_app = typer.Typer(help="Commands for generation settings")
account_app = typer.Typer(help="Commands for local accounts")

app.add_typer(workflow_app, name="workflow")
app.add_typer(history_app, name="history")
app.add_typer(settings_app, name="settings")
app.add_typer(account_app, name="account")


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", help="Logging level for diagnostics"),
) -> None:
    """automate-gpt CLI entry point."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _fail(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED)
    raise typer.Exit(code=1)


async def _current_user_id(kv: KeyValueStore) -> Optional[str]:
    user = await AccountStore(kv).current_user()
    return user.id if user else None


@workflow_app.command("list")
def workflow_list() -> None:
    """
    List the available workflow templates.

    Example:
        automate-gpt workflow list
        # Output: summarizer    📄 PDF/Text Summarizer
    """
    for template in list_templates():
        typer.echo(f"{template.id}\t{template.emoji} {template.title}")


@app.command("run")
def run(
    workflow_id: str,
    text: Optional[str] = typer.Option(None, "--text", help="Input text"),
    file: Optional[Path] = typer.Option(None, "--file", help="Read input from a file"),
) -> None:
    """
    Run a workflow on text or on the contents of a file.

    The result is printed and stored in the signed-in user's history.

    Example:
        automate-gpt run summarizer --text "Long article..."
        automate-gpt run task_creator --file goals.txt
    """
    if (text is None) == (file is None):
        _fail("Provide exactly one of --text or --file")

    try:
        if file is not None:
            if not file.exists():
                _fail(f"File not found: {file}")
            text = read_file_text(file.name, file.read_bytes())

        async def _run():
            kv = get_store()
            executor = create_executor(store=kv)
            try:
                return await executor.run(
                    workflow_id, text, user_id=await _current_user_id(kv)
                )
            finally:
                await executor.aclose()

        result = asyncio.run(_run())
    except AutomateGPTError as exc:
        _fail(str(exc))

    typer.echo(result.output)
    typer.echo(f"\n[{result.workflow_id}] {result.tokens} tokens")


@history_app.command("list")
def history_list() -> None:
    """List stored results, newest first."""

    async def _list():
        kv = get_store()
        return await HistoryStore(kv).get_history(await _current_user_id(kv))

    results = asyncio.run(_list())
    if not results:
        typer.echo("No history found")
        return
    for item in results:
        preview = item.input.replace("\n", " ")[:60]
        typer.echo(
            f"{item.timestamp.isoformat()}\t{item.workflow_id}\t{item.tokens}\t{preview}"
        )


@history_app.command("export")
def history_export(
    output_dir: Path = typer.Option(Path("."), help="Directory for the export file"),
) -> None:
    """Write the history to automate-gpt-history-YYYY-MM-DD.json."""

    async def _export():
        kv = get_store()
        return await HistoryStore(kv).write_export(
            output_dir, await _current_user_id(kv)
        )

    path = asyncio.run(_export())
    typer.echo(f"Exported history to {path}")


@history_app.command("clear")
def history_clear() -> None:
    """Delete all stored results."""

    async def _clear():
        kv = get_store()
        await HistoryStore(kv).clear_history(await _current_user_id(kv))

    asyncio.run(_clear())
    typer.echo("History cleared")


@settings_app.command("show")
def settings_show() -> None:
    """Show the model and token budget used for generation."""

    async def _show():
        kv = get_store()
        return await HistoryStore(kv).get_settings(await _current_user_id(kv))

    settings = asyncio.run(_show())
    typer.echo(f"model\t{settings.model}")
    typer.echo(f"max_tokens\t{settings.max_tokens}")


@settings_app.command("set")
def settings_set(
    model: Optional[str] = typer.Option(None, help="Model hint for the primary provider"),
    max_tokens: Optional[int] = typer.Option(None, help="Response token budget (100-4000)"),
) -> None:
    """Update generation settings."""
    if model is not None and model not in SUPPORTED_MODELS:
        _fail(f"Unsupported model: {model}. Choose from {', '.join(SUPPORTED_MODELS)}")

    async def _set():
        kv = get_store()
        user_id = await _current_user_id(kv)
        history = HistoryStore(kv)
        current = await history.get_settings(user_id)
        update = {}
        if model is not None:
            update["model"] = model
        if max_tokens is not None:
            update["max_tokens"] = max_tokens
        settings = AppSettings.model_validate({**current.model_dump(), **update})
        await history.save_settings(settings, user_id)
        return settings

    try:
        settings = asyncio.run(_set())
    except ValidationError:
        _fail("max-tokens must be between 100 and 4000")
    typer.echo(f"Settings saved: model={settings.model} max_tokens={settings.max_tokens}")


@account_app.command("signup")
def account_signup(
    name: str,
    email: str,
    password: str = typer.Option(..., prompt=True, hide_input=True),
) -> None:
    """Create a local account and sign in."""
    try:
        user = asyncio.run(AccountStore(get_store()).sign_up(name, email, password))
    except AutomateGPTError as exc:
        _fail(str(exc))
    typer.echo(f"Welcome, {user.name}!")


@account_app.command("signin")
def account_signin(
    email: str,
    password: str = typer.Option(..., prompt=True, hide_input=True),
) -> None:
    """Sign in to an existing account."""
    try:
        user = asyncio.run(AccountStore(get_store()).sign_in(email, password))
    except AutomateGPTError as exc:
        _fail(str(exc))
    typer.echo(f"Signed in as {user.email}")


@account_app.command("signout")
def account_signout() -> None:
    asyncio.run(AccountStore(get_store()).sign_out())
    typer.echo("Signed out")


@account_app.command("whoami")
def account_whoami() -> None:
    """Show the signed-in account."""
    user = asyncio.run(AccountStore(get_store()).current_user())
    if user is None:
        typer.echo("Not signed in")
        return
    typer.echo(f"{user.name} <{user.email}>")


@account_app.command("reset-password")
def account_reset_password(
    email: str,
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    """Set a new password for an account."""
    try:
        asyncio.run(AccountStore(get_store()).reset_password(email, password))
    except AutomateGPTError as exc:
        _fail(str(exc))
    typer.echo("Password updated")


if __name__ == "__main__":
    app()
