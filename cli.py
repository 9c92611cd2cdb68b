"""CLI entry point for hls-fetch-proxy."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import ENV_PREFIX, load_config
from core.exceptions import ConfigurationError
from ui.dashboard import Dashboard
from ui.log_utils import CLI_LOG_FILE, clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        sys.exit(1)

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--config":
            console.print(f"[bold]Listen:[/bold] {config.proxy.host}:{config.proxy.port}")
            console.print(f"[bold]Upstream timeout:[/bold] {config.upstream.timeout}s")
            console.print(f"[bold]Max redirects:[/bold] {config.upstream.max_redirects}")
            console.print(f"[bold]Log file:[/bold] {CLI_LOG_FILE}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

        console.print(f"[red][ERROR][/red] Unknown argument: {arg}")
        sys.exit(2)

    clear_logs()
    dashboard = Dashboard(config)

    import uvicorn

    app = create_app(config, dashboard)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
    )
    server = uvicorn.Server(uvicorn_config)

    if config.proxy.dashboard:
        dashboard.start()
    else:
        console.print(f"Listening on http://{config.proxy.host}:{config.proxy.port}")
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", host=config.proxy.host, port=config.proxy.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = f"""
[bold cyan]HLS Fetch Proxy[/bold cyan]

Fetches remote resources and rewrites HLS playlists so every segment
and key is fetched back through this proxy.

[bold]Usage:[/bold]
    hls-fetch-proxy              Start with live dashboard
    hls-fetch-proxy --config     Show effective settings
    hls-fetch-proxy --help       Show this help

[bold]Endpoints:[/bold]
    GET /health
    GET /fetch?url=<absolute-url>&ref_=<optional-referrer>

[bold]Environment:[/bold]
    {ENV_PREFIX}HOST, {ENV_PREFIX}PORT, {ENV_PREFIX}DASHBOARD
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
