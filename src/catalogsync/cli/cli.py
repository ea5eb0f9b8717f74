"""CLI application for catalog sync tooling."""

import typer

from catalogsync.cli.commands.dynamodb import app as dynamodb_app

app = typer.Typer(
    help="catalogsync - publish AWS inventory to the software catalog",
    no_args_is_help=True,
)

app.add_typer(dynamodb_app, name="dynamodb")


if __name__ == "__main__":
    app()
