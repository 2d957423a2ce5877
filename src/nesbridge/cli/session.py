"""Standalone session commands."""
import asyncio

import click

from ..config import get_config
from ..errors import SessionError
from ..health import probe_status
from ..session import SessionSupervisor


async def _serve(rom: str, port: int):
    config = get_config()
    supervisor = SessionSupervisor.from_config(config)
    supervisor.port = port

    try:
        session = await supervisor.launch(rom)
    except SessionError as e:
        click.echo(f"Failed to start session: {e}", err=True)
        raise click.Abort()
    if session is None:
        click.echo("Session is busy, try again", err=True)
        raise click.Abort()

    click.echo(f"Serving {rom} from {session.root_dir}")
    click.echo(f"Open {session.entry_url()}")
    try:
        await asyncio.Event().wait()
    finally:
        await supervisor.stop()
        click.echo("Server stopped")


@click.command()
@click.argument('rom')
@click.option('--port', type=int, default=None, help='Override the configured port')
def serve(rom, port):
    """Run a session for ROM until interrupted."""
    if port is None:
        port = get_config().server.port
    try:
        asyncio.run(_serve(rom, port))
    except KeyboardInterrupt:
        pass


@click.command()
@click.option('--port', type=int, default=None, help='Override the configured port')
def probe(port):
    """Check whether a local session answers on the server root."""
    config = get_config()
    port = port or config.server.port
    url = f"http://{config.server.host}:{port}/"

    status = asyncio.run(probe_status(url, config.server.probe_timeout))
    if status is None:
        click.echo(f"No response from {url}", err=True)
        raise click.exceptions.Exit(1)

    click.echo(f"{url} -> {status}")
    if status != 200:
        raise click.exceptions.Exit(1)
