"""Console entry point: one-shot and streaming chat completions."""

import asyncio
import logging

import typer
from rich.console import Console

from src.config.settings import settings
from src.modules.chat.schemas import CREDENTIALS_NOT_SET
from src.modules.chat.service import ChatBackendError, ChatSession, build_session
from src.modules.chat.transcript import StreamTranscript

logger = logging.getLogger(__name__)

err_console = Console(stderr=True)

app = typer.Typer(
    name="chat",
    help="Send prompts to the configured chat-completion endpoint.",
    no_args_is_help=True,
)

MISSING_CREDENTIALS = (
    "Please set the environment variables AZURE_OPENAI_ENDPOINT and AZURE_OPENAI_API_KEY."
)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")):
    logging.basicConfig(level=logging.DEBUG if verbose else settings.log_level)


def _ready_session() -> ChatSession:
    session = build_session(settings)
    error = session.configuration_error
    if error is not None:
        message = MISSING_CREDENTIALS if error == CREDENTIALS_NOT_SET else f"Error: {error}"
        err_console.print(message, style="red", markup=False, soft_wrap=True)
        raise typer.Exit(1)
    return session


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="User prompt."),
    system: str | None = typer.Option(None, "--system", "-s", help="System prompt."),
):
    """Send a prompt and print the full reply."""
    session = _ready_session()
    result = asyncio.run(session.ask(prompt, system))
    if not result.ok:
        err_console.print(result.render(), style="red", markup=False, soft_wrap=True)
        raise typer.Exit(1)
    # Only the first choice is printed
    typer.echo(f"Response:{result.render()}")


@app.command()
def stream(
    prompt: str = typer.Argument(..., help="User prompt."),
    system: str | None = typer.Option(None, "--system", "-s", help="System prompt."),
):
    """Send a prompt and print the reply as it arrives."""
    session = _ready_session()
    request = session.build_request(prompt, system)

    async def _run() -> None:
        transcript = StreamTranscript()
        async for fragment in session.stream(request):
            for event in transcript.feed(fragment):
                if event.kind == "role":
                    typer.echo(f"Role: {event.value}")
                else:
                    typer.echo(event.value, nl=False)
        typer.echo()

    try:
        asyncio.run(_run())
    except ChatBackendError as exc:
        typer.echo()
        err_console.print(f"Error: {exc}", style="red", markup=False, soft_wrap=True)
        raise typer.Exit(1)


@app.command()
def serve(
    host: str = typer.Option(settings.app_host, help="Bind address."),
    port: int = typer.Option(settings.app_port, help="Bind port."),
    reload: bool = typer.Option(False, help="Reload on code changes."),
):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("src.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
