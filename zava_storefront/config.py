from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()  # take environment variables from .env.

PACKAGE_DIR = Path(__file__).parent.resolve()
DEFAULT_CATALOG_PATH = PACKAGE_DIR / "data" / "catalog.yaml"

# Azure AI Services only accepts tokens issued for this audience. The SDKs derive
# a scope from the endpoint URL otherwise, which the service rejects.
DEFAULT_TOKEN_SCOPE = "https://cognitiveservices.azure.com/.default"

REQUIRED_ENV_VARS = (
    "AZURE_AI_INFERENCE_ENDPOINT",
    "AZURE_AI_CHAT_DEPLOYMENT_NAME",
    "AZURE_AI_IMAGE_SERVICES_ENDPOINT",
    "AZURE_AI_IMAGE_DEPLOYMENT_NAME",
    "AZURE_AI_CONTENT_SAFETY_ENDPOINT",
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing or invalid."""


def _clean_env(value: str | None) -> str:
    if value is None:
        return ""
    return value.strip().strip('"').strip("'")


def _split_list(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(_clean_env(item) for item in value.split(",") if _clean_env(item))


def _str_to_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _to_number(name: str, value: str, cast):
    try:
        return cast(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be numeric, got {value!r}.") from exc


@dataclass(frozen=True)
class Settings:
    """
    Encapsulates the storefront's startup configuration.

    Endpoint URLs and deployment names are required. ``Settings.from_env`` refuses
    to build a partial configuration so the app never serves requests half wired.
    """
    inference_endpoint: str
    chat_deployment: str
    image_endpoint: str
    image_deployment: str
    content_safety_endpoint: str

    token_scope: str = DEFAULT_TOKEN_SCOPE
    openai_api_version: str = "2024-02-01"
    chat_max_tokens: int = 300
    request_timeout_seconds: float = 60.0

    catalog_path: Path = DEFAULT_CATALOG_PATH
    shopping_keywords: tuple[str, ...] = field(default_factory=tuple)

    log_level: str = "INFO"
    log_to_file: bool = False
    log_file_path: str = "zava_storefront.log"
    appinsights_connection_string: str = ""
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        missing = [name for name in REQUIRED_ENV_VARS if not _clean_env(os.getenv(name))]
        if missing:
            raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")

        catalog_path = _clean_env(os.getenv("CATALOG_PATH"))

        return cls(
            inference_endpoint=_clean_env(os.getenv("AZURE_AI_INFERENCE_ENDPOINT")),
            chat_deployment=_clean_env(os.getenv("AZURE_AI_CHAT_DEPLOYMENT_NAME")),
            image_endpoint=_clean_env(os.getenv("AZURE_AI_IMAGE_SERVICES_ENDPOINT")),
            image_deployment=_clean_env(os.getenv("AZURE_AI_IMAGE_DEPLOYMENT_NAME")),
            content_safety_endpoint=_clean_env(os.getenv("AZURE_AI_CONTENT_SAFETY_ENDPOINT")),
            token_scope=_clean_env(os.getenv("AZURE_AI_TOKEN_SCOPE")) or DEFAULT_TOKEN_SCOPE,
            openai_api_version=_clean_env(os.getenv("AZURE_OPENAI_API_VERSION")) or "2024-02-01",
            chat_max_tokens=_to_number(
                "CHAT_MAX_TOKENS", _clean_env(os.getenv("CHAT_MAX_TOKENS")) or "300", int
            ),
            request_timeout_seconds=_to_number(
                "REQUEST_TIMEOUT_SECONDS", _clean_env(os.getenv("REQUEST_TIMEOUT_SECONDS")) or "60", float
            ),
            catalog_path=Path(catalog_path) if catalog_path else DEFAULT_CATALOG_PATH,
            shopping_keywords=_split_list(os.getenv("SHOPPING_KEYWORDS")),
            log_level=(_clean_env(os.getenv("LOG_LEVEL")) or "INFO").upper(),
            log_to_file=_str_to_bool(os.getenv("LOG_TO_FILE"), False),
            log_file_path=_clean_env(os.getenv("LOG_FILE")) or "zava_storefront.log",
            appinsights_connection_string=_clean_env(os.getenv("APPLICATIONINSIGHTS_CONNECTION_STRING")),
            port=_to_number("PORT", _clean_env(os.getenv("PORT")) or "8000", int),
        )


# Root app logger; module loggers hang off it as "app.<module>".
logger = logging.getLogger("app")


def get_logger(module_name: str) -> logging.Logger:
    return logging.getLogger(f"app.{module_name}")


def configure_logging(level: str = "INFO", log_to_file: bool = False, log_file_path: str = "zava_storefront.log") -> None:
    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler(stream=sys.stdout)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_to_file:
        file_handler = logging.FileHandler(log_file_path)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


# Enable instrumentation of the inference client and, optionally, export to App Insights
def enable_telemetry(connection_string: str = "") -> None:
    from azure.ai.inference.tracing import AIInferenceInstrumentor

    AIInferenceInstrumentor().instrument()

    if not connection_string:
        logger.warning("No application insights connection string configured, traces stay local.")
        return

    from azure.monitor.opentelemetry import configure_azure_monitor

    configure_azure_monitor(connection_string=connection_string)
    logger.info("Enabled telemetry export to Application Insights")
