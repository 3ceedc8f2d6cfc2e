"""Enables running the server via: python -m matrix_mcp"""

from matrix_mcp.cli import cli

if __name__ == "__main__":
    cli()
