"""Main CLI application using Typer.

Acts as the host surface: transcripts are plain files, one-shot replies are
printed to stdout.
"""
from pathlib import Path

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from ..transcript import Role, decode
from .providers import get_client, get_config, get_controller

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="palaver",
    help="Chat with a language model through plain-text transcripts",
    no_args_is_help=True,
    add_completion=True,
)

# stdout carries results; diagnostics go to stderr
console = Console()
err_console = Console(stderr=True)

_state: dict[str, object] = {}


@app.callback()
def configure(
    model: str | None = typer.Option(None, "--model", help="Model identifier"),
    api_url: str | None = typer.Option(None, "--api-url", help="Endpoint base URL"),
    timeout: float | None = typer.Option(None, "--timeout", help="Request timeout in seconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug reports"),
):
    """Global options shared by every command."""
    _state["config"] = dict(model=model, api_url=api_url, timeout=timeout)
    _state["verbose"] = verbose


def _read_selection(selection_file: Path | None) -> str | None:
    if selection_file is None:
        return None
    return selection_file.read_text(encoding="utf-8")


def _controller():
    try:
        config = get_config(**_state.get("config", {}))
    except ValidationError as e:
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            err_console.print(f"[red]Invalid configuration for {field}: {error['msg']}[/red]")
        raise typer.Exit(code=1)

    client = get_client(config, err_console, verbose=bool(_state.get("verbose")))
    return client, get_controller(config, client)


@app.command()
def new(
    prompt: str = typer.Argument(..., help="First request of the conversation"),
    mode: str | None = typer.Option(None, "--mode", "-m", help="Host mode used to pick the system prompt"),
    selection_file: Path | None = typer.Option(
        None, "--selection-file", "-s", exists=True, dir_okay=False,
        help="File whose content is attached to the request"
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", dir_okay=False,
        help="Write the transcript to this file instead of printing it"
    ),
):
    """Start a new conversation transcript."""
    client, controller = _controller()
    with client:
        transcript = controller.start_session(prompt, _read_selection(selection_file), mode)

    if output is not None:
        output.write_text(transcript, encoding="utf-8")
        err_console.print(f"[green]Transcript written to {output}[/green]")
    else:
        console.print(transcript, markup=False, highlight=False, soft_wrap=True)

    if not any(msg.role is Role.ASSISTANT for msg in decode(transcript)):
        err_console.print("[red]No reply received, transcript holds the request only[/red]")
        raise typer.Exit(code=1)


@app.command(name="continue")
def continue_(
    transcript_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="Transcript to continue"
    ),
):
    """Send a transcript and append the reply to it in place."""
    text = transcript_file.read_text(encoding="utf-8")
    if not decode(text):
        err_console.print("[yellow]No messages found in transcript, nothing to send[/yellow]")
        raise typer.Exit(code=1)

    client, controller = _controller()
    with client:
        appended = controller.continue_session(text)

    if appended is None:
        err_console.print("[red]No reply received, transcript left unchanged[/red]")
        raise typer.Exit(code=1)

    with transcript_file.open("a", encoding="utf-8") as f:
        f.write(appended)
    console.print(appended, markup=False, highlight=False, soft_wrap=True)


@app.command()
def replace(
    prompt: str = typer.Argument(..., help="How to rewrite the selection"),
    selection_file: Path = typer.Option(
        ..., "--selection-file", "-s", exists=True, dir_okay=False,
        help="File holding the text to rewrite"
    ),
    mode: str | None = typer.Option(None, "--mode", "-m", help="Host mode used to pick the system prompt"),
):
    """Print a rewritten version of the selection."""
    client, controller = _controller()
    with client:
        reply = controller.replace_region(prompt, _read_selection(selection_file) or "", mode)
    _print_reply(reply)


@app.command()
def insert(
    prompt: str = typer.Argument(..., help="What to generate"),
    selection_file: Path | None = typer.Option(
        None, "--selection-file", "-s", exists=True, dir_okay=False,
        help="Optional file whose content is given as input"
    ),
    mode: str | None = typer.Option(None, "--mode", "-m", help="Host mode used to pick the system prompt"),
):
    """Print generated text for insertion."""
    client, controller = _controller()
    with client:
        reply = controller.insert(prompt, _read_selection(selection_file), mode)
    _print_reply(reply)


@app.command()
def title(
    transcript_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="Transcript to name"
    ),
):
    """Print a short title candidate for a transcript."""
    client, controller = _controller()
    with client:
        reply = controller.generate_title(transcript_file.read_text(encoding="utf-8"))
    _print_reply(reply)


@app.command()
def show(
    transcript_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="Transcript to display"
    ),
):
    """Show the messages decoded from a transcript."""
    messages = decode(transcript_file.read_text(encoding="utf-8"))
    if not messages:
        console.print("[yellow]No messages found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Role", style="yellow", width=10)
    table.add_column("Content")

    for i, msg in enumerate(messages, 1):
        preview = msg.content[:500] + "..." if len(msg.content) > 500 else msg.content
        table.add_row(str(i), msg.role.value, preview)

    console.print(table)


def _print_reply(reply: str | None) -> None:
    if reply is None:
        err_console.print("[red]No reply received[/red]")
        raise typer.Exit(code=1)
    console.print(reply, markup=False, highlight=False, soft_wrap=True)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
