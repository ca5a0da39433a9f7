"""Command line interface for mcp-res-proxy."""

import sys
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .app import configure_logging, create_app
from .config import get_settings
from .rpc import run_stdio
from .services.auth import resolve_auth_type

app = typer.Typer(help="mcp-res-proxy - forwarding gateway for HTTP APIs")
console = Console()

MODES = ("http", "stdio")


@app.command()
def serve(
    mode: str = typer.Option("http", "--mode", help="Server mode: http|stdio"),
    host: Optional[str] = typer.Option(
        None, "--host", help="Host to bind to (http mode)"
    ),
    port: Optional[int] = typer.Option(
        None, "--port", help="Port to bind to (http mode)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Start the gateway."""
    settings = get_settings()
    if debug:
        settings = settings.model_copy(update={"debug": True})

    selected = mode.lower()
    if selected not in MODES:
        console.print(
            f"[bold red]Unknown mode: {mode} (expected http|stdio)[/bold red]"
        )
        raise typer.Exit(1)

    if selected == "stdio":
        configure_logging(settings, stream=sys.stderr)
        run_stdio(settings)
        return

    configure_logging(settings)

    import uvicorn

    bind_host = host or settings.host
    bind_port = port or int(settings.port)
    console.print(
        f"[bold blue]mcp-res-proxy running at "
        f"http://{bind_host}:{bind_port}[/bold blue]"
    )
    console.print(f"   Wrap responses: {settings.wrap_response}")
    target = settings.target_base_url or "none (use ?base=)"
    console.print(f"   Default target: {target}")

    uvicorn.run(
        create_app(settings),
        host=bind_host,
        port=bind_port,
        log_level=settings.log_level.lower(),
    )


@app.command()
def config_check() -> None:
    """Show the effective configuration."""
    settings = get_settings()

    table = Table(title="Configuration Status")
    table.add_column("Setting", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Value", style="yellow")

    table.add_row(
        "Target Base URL",
        "✓" if settings.target_base_url else "✗",
        settings.target_base_url or "Not set (callers must pass base)",
    )
    table.add_row("Auth Type", "✓", resolve_auth_type(settings).value)
    table.add_row(
        "Auth Token",
        "✓" if settings.auth_token else "✗",
        "Set" if settings.auth_token else "Not set",
    )
    table.add_row(
        "Auth User",
        "✓" if settings.auth_user else "✗",
        settings.auth_user or "Not set",
    )
    table.add_row("Wrap Response", "✓", str(settings.wrap_response))
    table.add_row("Mount Prefix", "✓", settings.mount_prefix)
    table.add_row("Request Timeout", "✓", f"{settings.request_timeout}s")
    table.add_row("Port", "✓", settings.port)
    table.add_row("Log Level", "✓", settings.log_level)

    console.print(table)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
