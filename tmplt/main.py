# tmplt/main.py
"""Main entry point for the tmplt CLI application."""

from tmplt.cli.interface import main_cli


def entrypoint():
    """Function to be called by the script defined in pyproject.toml."""
    main_cli(prog_name="tmplt")

if __name__ == '__main__':
    entrypoint()
