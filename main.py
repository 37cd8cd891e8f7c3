"""Main entry point for the StudySync CLI."""

from studysync.cli.app import app


def main():
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    main()
