"""Entry point for the focustree CLI.

Usage:
    python -m focustree.interfaces.cli.main

Or via installed entry point:
    focustree <command>
"""

from focustree.interfaces.cli import app


def main() -> None:
    """Run the focustree CLI application."""
    app()


if __name__ == "__main__":
    main()
