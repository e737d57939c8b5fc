"""Command line interface for HashSign.

Commands:
    register   Create an account's document store
    create     Upload a file and register it for signing
    sign       Sign a document
    list       List the documents an account created
    status     Show a document's signing progress
    view       Download a document's content
    serve      Run the API server

Every command except serve talks to a running HashSign API (--api-url or
HASHSIGN_API_URL).
"""

import asyncio
import json
from collections.abc import Awaitable, Callable
from enum import Enum
from pathlib import Path
from typing import Any, Optional, TypeVar

import httpx
import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from hashsign import __version__
from hashsign.client import HashSignAPIError, HashSignClient

T = TypeVar("T")


class OutputFormat(str, Enum):
    """Output format options."""

    text = "text"
    json = "json"


app = typer.Typer(
    name="hashsign",
    help="Multi-party document signing",
    add_completion=False,
)
console = Console()

ApiUrlOption = typer.Option(
    None,
    "--api-url",
    "-u",
    envvar="HASHSIGN_API_URL",
    help="API base URL (default: http://localhost:8000)",
)
FormatOption = typer.Option(
    OutputFormat.text,
    "--format",
    "-o",
    help="Output format: text or json",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"hashsign version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """HashSign: register documents and collect signatures."""


def _run(api_url: Optional[str], call: Callable[[HashSignClient], Awaitable[T]]) -> T:
    """Run one client call, turning API and connection errors into exit code 1."""

    async def runner() -> T:
        async with HashSignClient(base_url=api_url) as client:
            return await call(client)

    try:
        return asyncio.run(runner())
    except HashSignAPIError as e:
        console.print(f"[red]Error:[/red] {e}", style="bold")
        if e.problem_type:
            console.print(f"  {e.problem_type}", style="dim")
        raise typer.Exit(code=1)
    except httpx.RequestError as e:
        console.print(f"[red]Error:[/red] Cannot reach API: {e}", style="bold")
        raise typer.Exit(code=1)


def _print_json(data: Any) -> None:
    console.print_json(json.dumps(data))


@app.command()
def register(
    account: str = typer.Argument(..., help="Account address"),
    api_url: Optional[str] = ApiUrlOption,
) -> None:
    """Register an account. Registering twice is harmless.

    Example:
        hashsign register 0xa11ce
    """
    result = _run(api_url, lambda c: c.register(account))
    if result["registered"]:
        console.print(f"[green]Registered[/green] {account}")
    else:
        console.print(f"{account} is already registered")


@app.command()
def create(
    account: str = typer.Argument(..., help="Creating account"),
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to sign"),
    signers: str = typer.Option(
        ..., "--signers", "-s", help="Comma-separated signer accounts"
    ),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Upload name"),
    api_url: Optional[str] = ApiUrlOption,
    output_format: OutputFormat = FormatOption,
) -> None:
    """Upload a file and register it as a document awaiting signatures.

    Example:
        hashsign create 0xa11ce contract.pdf --signers "0xa11ce, 0xb0b"
    """
    payload = file.read_bytes()
    result = _run(
        api_url,
        lambda c: c.create_document(account, payload, signers, name=name or file.name),
    )
    if output_format == OutputFormat.json:
        _print_json(result)
        return
    console.print(
        f"[green]Created[/green] document {result['document_id']} "
        f"for {len(result['signers'])} signer(s)"
    )
    console.print(f"  content: {result['content_url']}", style="dim")


@app.command()
def sign(
    account: str = typer.Argument(..., help="Signing account"),
    owner: str = typer.Argument(..., help="Account that created the document"),
    document_id: int = typer.Argument(..., min=0, help="Document id"),
    api_url: Optional[str] = ApiUrlOption,
) -> None:
    """Sign a document.

    Example:
        hashsign sign 0xb0b 0xa11ce 0
    """
    _run(api_url, lambda c: c.sign_document(account, owner, document_id))
    console.print(f"[green]Signed[/green] document {document_id} of {owner} as {account}")


@app.command("list")
def list_documents(
    account: str = typer.Argument(..., help="Creating account"),
    api_url: Optional[str] = ApiUrlOption,
    output_format: OutputFormat = FormatOption,
) -> None:
    """List documents created by an account with their signing progress."""
    result = _run(api_url, lambda c: c.list_documents(account))
    if output_format == OutputFormat.json:
        _print_json(result)
        return

    table = Table(title=f"Documents of {account}")
    table.add_column("ID", justify="right")
    table.add_column("Content")
    table.add_column("Signatures", justify="center")
    table.add_column("Status")
    for doc in result["documents"]:
        status = "[green]Completed[/green]" if doc["is_completed"] else "[yellow]Pending[/yellow]"
        table.add_row(str(doc["id"]), doc["content_id"], doc["progress"], status)
    console.print(table)


@app.command()
def status(
    owner: str = typer.Argument(..., help="Account that created the document"),
    document_id: int = typer.Argument(..., min=0, help="Document id"),
    api_url: Optional[str] = ApiUrlOption,
    output_format: OutputFormat = FormatOption,
) -> None:
    """Show a document's signing progress."""
    result = _run(api_url, lambda c: c.document_status(owner, document_id))
    if output_format == OutputFormat.json:
        _print_json(result)
        return
    console.print(f"Document {document_id}: {result['state']} ({result['progress']})")


@app.command()
def view(
    content_id: str = typer.Argument(..., help="Content identifier"),
    output: Path = typer.Option(..., "--output", "-O", help="Where to write the content"),
    api_url: Optional[str] = ApiUrlOption,
) -> None:
    """Download a document's content to a file."""
    content = _run(api_url, lambda c: c.download(content_id))
    output.write_bytes(content)
    console.print(f"Wrote {len(content)} bytes to {output}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Run the HashSign API server.

    The backend is chosen by HASHSIGN_BACKEND (memory or remote).
    """
    uvicorn.run("hashsign.api.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
