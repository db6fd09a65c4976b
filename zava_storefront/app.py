"""
Flask API for the Zava Storefront AI features.

Exposes:
  POST /chat/send         – store assistant grounded on the product catalog
  POST /image/generate    – content-safety-checked product image generation
  GET  /products          – the loaded product catalog
  GET  /health            – liveness / readiness probe
  GET  /                  – basic info page

Request body for /chat/send:
{
  "message": "What's the price of the headphones?"
}

Request body for /image/generate:
{
  "productId": 1,
  "description": "matte black over-ear headphones"
}
"""

from __future__ import annotations

from flask import Flask, jsonify, request
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .catalog import Catalog, load_catalog
from .chat_service import ChatService
from .config import Settings, configure_logging, enable_telemetry, get_logger
from .credentials import CognitiveServicesCredential
from .image_service import Blocked, ImageGenerationService

logger = get_logger(__name__)

# Longer messages are truncated before reaching the chat service.
MAX_MESSAGE_LENGTH = 1000


class ChatMessageRequest(BaseModel):
    message: str


class GenerateImageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(alias="productId")
    description: str


def _parse(model: type[BaseModel]):
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return None
    try:
        return model.model_validate(body)
    except ValidationError as e:
        logger.info(f"Rejected request body: {e.error_count()} validation error(s)")
        return None


def create_app(
    settings: Settings | None = None,
    *,
    catalog: Catalog | None = None,
    chat_service: ChatService | None = None,
    image_service: ImageGenerationService | None = None,
) -> Flask:
    """
    Build the Flask app. Missing configuration or an unreadable catalog raises
    here, before any request is served.
    """
    if settings is None:
        settings = Settings.from_env()
        configure_logging(settings.log_level, settings.log_to_file, settings.log_file_path)
        if settings.appinsights_connection_string:
            enable_telemetry(settings.appinsights_connection_string)

    if catalog is None:
        catalog = load_catalog(settings.catalog_path)

    if chat_service is None or image_service is None:
        credential = CognitiveServicesCredential(settings.token_scope)
        if chat_service is None:
            chat_service = ChatService.from_settings(settings, catalog, credential)
        if image_service is None:
            image_service = ImageGenerationService.from_settings(settings, credential)

    app = Flask(__name__)
    app.extensions["zava_storefront"] = {
        "settings": settings,
        "catalog": catalog,
        "chat_service": chat_service,
        "image_service": image_service,
    }

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "healthy"}), 200

    @app.route("/", methods=["GET"])
    def index():
        return jsonify({
            "app": "zava-storefront",
            "description": "Store assistant and product image generation for ZavaStorefront",
            "endpoints": {
                "POST /chat/send": "Ask the store assistant about our products",
                "POST /image/generate": "Generate a product photo from a description",
                "GET /products": "List the product catalog",
                "GET /health": "Health check",
            },
        })

    @app.route("/products", methods=["GET"])
    def products():
        return jsonify({"products": [product.to_dict() for product in catalog]})

    # No CSRF token required: no server-side state is mutated on behalf of the user.
    @app.route("/chat/send", methods=["POST"])
    def chat_send():
        body = _parse(ChatMessageRequest)
        if body is None or not body.message.strip():
            return jsonify({"error": "Message cannot be empty."}), 400

        message = body.message.strip()[:MAX_MESSAGE_LENGTH]
        reply = chat_service.get_response(message)
        logger.info(f"[/chat/send] reply origin={reply.origin.value}")
        return jsonify({"reply": reply.text})

    @app.route("/image/generate", methods=["POST"])
    def image_generate():
        body = _parse(GenerateImageRequest)
        if body is None or not body.description.strip():
            return jsonify({"error": "Description is required."}), 400

        logger.info(f"GenerateImage: product={body.product_id}")

        try:
            outcome = image_service.generate_product_image(body.description)
        except Exception as e:
            logger.error(f"[/image/generate] failed for product={body.product_id}: {type(e).__name__}: {e}")
            return jsonify({"error": "Image generation failed."}), 500

        if isinstance(outcome, Blocked):
            return jsonify({"error": "Content safety check prevented image generation."}), 422

        return jsonify({"imageUrl": outcome.url})

    return app
