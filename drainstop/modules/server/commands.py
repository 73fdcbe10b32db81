import click
from typing import Optional, TextIO
from .command.serve import ServeCommand


def create_serve_command() -> click.Command:
    """Create the serve command."""

    @click.command(name='serve')
    @click.option('--config', 'config_file', type=click.File('r'), help='YAML configuration file')
    @click.option('--host', type=str, help='Interface to bind')
    @click.option('--port', type=int, help='Port to listen on')
    @click.option('--shutdown-timeout', type=float, help='Seconds before a graceful shutdown is forced')
    @click.pass_context
    def serve(ctx, config_file: Optional[TextIO], host: Optional[str], port: Optional[int],
              shutdown_timeout: Optional[float]):
        """Run the HTTP server until SIGINT/SIGTERM, then drain and exit.

        Exits 0 after a clean shutdown, 1 if the shutdown timed out or a
        resource failed to close.
        """
        command = ServeCommand(logger=ctx.obj.logger)
        command.run(config_file, {
            "host": host,
            "port": port,
            "shutdown_timeout": shutdown_timeout,
        })

    return serve
