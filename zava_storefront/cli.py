import sys

import click

from .app import MAX_MESSAGE_LENGTH, create_app
from .catalog import load_catalog
from .chat_service import ChatService
from .config import DEFAULT_CATALOG_PATH, Settings, configure_logging
from .credentials import CognitiveServicesCredential
from .image_service import Blocked, ImageGenerationService


def _load_settings() -> Settings:
    settings = Settings.from_env()
    configure_logging(settings.log_level, settings.log_to_file, settings.log_file_path)
    return settings


@click.group()
def cli() -> None:
    """Zava Storefront AI backend CLI."""


@cli.command(name="serve")
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", type=int, default=None, help="Defaults to $PORT or 8000.")
def serve_command(host: str, port: int | None) -> None:
    """Run the Flask API."""
    app = create_app()
    settings = app.extensions["zava_storefront"]["settings"]
    app.run(host=host, port=port or settings.port, debug=False)


@cli.command(name="products")
@click.option("--catalog", "catalog_path", type=click.Path(exists=True, dir_okay=False), default=None)
def products_command(catalog_path: str | None) -> None:
    """List the product catalog."""
    for product in load_catalog(catalog_path or DEFAULT_CATALOG_PATH):
        data = product.to_dict()
        click.echo(f"{data['id']:>3}  {data['name']}  ${data['price']}")


@cli.command(name="ask")
@click.argument("message")
def ask_command(message: str) -> None:
    """Ask the store assistant a question."""
    settings = _load_settings()
    catalog = load_catalog(settings.catalog_path)
    service = ChatService.from_settings(settings, catalog, CognitiveServicesCredential(settings.token_scope))

    reply = service.get_response(message.strip()[:MAX_MESSAGE_LENGTH])
    click.echo(reply.text)
    click.echo(f"[origin: {reply.origin.value}]", err=True)


@cli.command(name="image")
@click.argument("description")
def image_command(description: str) -> None:
    """Generate a product image from a description."""
    if not description.strip():
        raise click.BadParameter("Description is required.", param_hint="DESCRIPTION")

    settings = _load_settings()
    service = ImageGenerationService.from_settings(settings, CognitiveServicesCredential(settings.token_scope))

    outcome = service.generate_product_image(description)
    if isinstance(outcome, Blocked):
        click.echo(f"Blocked by content safety: {', '.join(outcome.verdict.triggered)}", err=True)
        sys.exit(2)
    click.echo(outcome.url)


if __name__ == "__main__":
    cli()
