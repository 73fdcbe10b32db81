import click
from drainstop.modules.config.commands import create_config_commands
from drainstop.modules.server.commands import create_serve_command
from drainstop.modules.logging import create_logger


class DrainstopContext:
    """Context object to store CLI state."""
    def __init__(self):
        self.logger = None

pass_context = click.make_pass_decorator(DrainstopContext, ensure=True)

@click.group()
@click.option('--output', '-o',
              type=click.Choice(['colorful', 'plain', 'json']),
              default='colorful',
              help='Output format (colorful for CLI, plain for CI/file, json for machine parsing)',
              envvar='DRAINSTOP_OUTPUT')
@click.option('--log-level', '-l',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
              default='INFO',
              help='Set the logging level',
              envvar='DRAINSTOP_LOG_LEVEL')
@pass_context
def cli(ctx, output, log_level):
    """drainstop: HTTP server with bounded-time graceful shutdown."""
    ctx.logger = create_logger(output, log_level)

cli.add_command(create_serve_command())
cli.add_command(create_config_commands())

def main():
    cli()

if __name__ == '__main__':
    main()
