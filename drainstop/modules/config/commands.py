import click
from typing import Optional, TextIO
from .command.show import ShowConfigCommand


def create_config_commands() -> click.Group:
    """Create the config command group."""

    @click.group(name='config')
    def config():
        """Inspect server configuration."""
        pass

    @config.command(name='show')
    @click.option('--config', 'config_file', type=click.File('r'), help='YAML configuration file')
    @click.pass_context
    def show(ctx, config_file: Optional[TextIO]):
        """Validate the configuration and print a summary."""
        ShowConfigCommand(logger=ctx.obj.logger).run(config_file)

    return config
