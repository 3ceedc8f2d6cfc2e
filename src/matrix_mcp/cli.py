"""Command line entry point for the matrix-mcp server.

Example MCP client configuration:

    mcpServers:
      matrix:
        type: stdio
        command: matrix-mcp
        env:
          MATRIX_API_KEY: "..."
"""

from typing import Optional

import click

from matrix_mcp import __version__
from matrix_mcp.config import MatrixConfig
from matrix_mcp.server import main


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config-file",
    envvar="MATRIX_MCP_CONFIG_FILE",
    type=click.Path(dir_okay=False),
    help="Path to a TOML config file",
)
@click.option(
    "--base-url",
    help="Override the Matrix API base URL",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Override the log level",
)
@click.option(
    "--strict-arguments/--permissive-arguments",
    default=None,
    help="Reject malformed tool arguments instead of forwarding them",
)
@click.version_option(__version__, prog_name="matrix-mcp")
def cli(
    config_file: Optional[str],
    base_url: Optional[str],
    log_level: Optional[str],
    strict_arguments: Optional[bool],
) -> None:
    """Serve Matrix tasks and messages as MCP tools over stdio.

    The Matrix API key is read from MATRIX_API_KEY.
    """
    config = MatrixConfig.from_env(config_file)

    if base_url:
        config.base_url = base_url
    if log_level:
        config.log_level = log_level.upper()
    if strict_arguments is not None:
        config.strict_arguments = strict_arguments

    main(config)


if __name__ == "__main__":
    cli()
