"""
Web Command - Serve the game API

manvsgod web [--host HOST] [--port PORT]
"""

import click
import uvicorn

from manvsgod.core.config import get_config


@click.command(name="web")
@click.option("--host", default=None, help="Host to bind to (default: MANVSGOD_WEBUI_HOST)")
@click.option("--port", default=None, type=int, help="Port to bind to (default: MANVSGOD_WEBUI_PORT)")
@click.option("--reload", is_flag=True, help="Enable auto-reload (development mode)")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Server log level",
    show_default=True,
)
def web_cmd(host, port, reload: bool, log_level: str):
    """Start the game API server"""
    config = get_config()
    host = host or config.webui_host
    port = port or config.webui_port

    click.secho(f"Starting Man vs God API at http://{host}:{port}", fg="cyan")
    uvicorn.run(
        "manvsgod.webui.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )
