from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from openai import AzureOpenAI
from opentelemetry import trace

from .config import Settings, get_logger
from .content_safety import ContentSafetyGate, SafetyVerdict

logger = get_logger(__name__)
tracer = trace.get_tracer(__name__)

IMAGE_PROMPT_TEMPLATE = (
    "Product photo for an e-commerce store: {description}. "
    "Clean white background, professional product photography style."
)


@dataclass(frozen=True)
class Generated:
    url: str


@dataclass(frozen=True)
class Blocked:
    verdict: SafetyVerdict


ImageOutcome = Union[Generated, Blocked]


def build_image_prompt(description: str) -> str:
    return IMAGE_PROMPT_TEMPLATE.format(description=description)


class ImageGenerationService:
    """
    Generates product photos with an Azure OpenAI image deployment.

    Every prompt goes through the content safety gate first. A blocked prompt is
    an expected outcome and comes back as ``Blocked``; a failing generation call
    has no safe placeholder image, so it is logged and re-raised.
    """

    def __init__(self, client: Any, safety_gate: ContentSafetyGate, deployment: str) -> None:
        self._client = client
        self._safety_gate = safety_gate
        self._deployment = deployment

    @classmethod
    def from_settings(cls, settings: Settings, credential) -> "ImageGenerationService":
        logger.info(
            f"ImageGenerationService: initializing with endpoint={settings.image_endpoint} "
            f"deployment={settings.image_deployment}"
        )
        try:
            client = AzureOpenAI(
                azure_endpoint=settings.image_endpoint,
                api_version=settings.openai_api_version,
                azure_ad_token_provider=credential.bearer_token_provider(),
                timeout=settings.request_timeout_seconds,
                max_retries=0,
            )
            safety_gate = ContentSafetyGate.from_settings(settings, credential)
        except Exception as e:
            logger.error(f"ImageGenerationService: failed to initialize - {e}")
            raise

        logger.info("ImageGenerationService: initialized successfully")
        return cls(client, safety_gate, settings.image_deployment)

    @tracer.start_as_current_span(name="generate_product_image")
    def generate_product_image(self, description: str) -> ImageOutcome:
        if not description or not description.strip():
            raise ValueError("Description is required.")

        prompt = build_image_prompt(description)

        verdict = self._safety_gate.classify(prompt)
        if verdict.blocked:
            logger.warning(
                f"ImageGeneration: blocked by content safety for description length={len(description)}"
            )
            return Blocked(verdict=verdict)

        logger.info(f"ImageGeneration: generating image for description length={len(description)}")
        try:
            result = self._client.images.generate(model=self._deployment, prompt=prompt, n=1)
            url = result.data[0].url if result.data else None
            if not url:
                raise ValueError("Image generation response contained no image URL.")
        except Exception as e:
            logger.exception(f"ImageGeneration: failed to generate image - {e}")
            raise

        logger.info("ImageGeneration: image generated successfully")
        return Generated(url=url)
