"""Entry point for the Minions CLI.

Usage:
    python -m minions.interfaces.cli.main

Or via installed entry point:
    minions <command>
"""

from minions.interfaces.cli import app


def main() -> None:
    """Run the Minions CLI application."""
    app()


if __name__ == "__main__":
    main()
