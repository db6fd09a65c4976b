"""
Pytest configuration and fixtures
"""
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from zava_storefront.catalog import Catalog, Product
from zava_storefront.config import Settings


HEADPHONES = Product(
    id=1,
    name="Wireless Noise-Canceling Headphones",
    price=Decimal("199.99"),
    description="Over-ear headphones with active noise cancellation.",
)
WATCH = Product(id=2, name="Smart Fitness Watch", price=Decimal("149.99"), description="Tracks heart rate and sleep.")
SPEAKER = Product(id=3, name="Portable Bluetooth Speaker", price=Decimal("79.99"), description="Waterproof speaker.")
MUG = Product(id=4, name="Tea Mug", price=Decimal("5"), description="A plain ceramic mug.")


@pytest.fixture
def catalog() -> Catalog:
    return Catalog.from_products([HEADPHONES, WATCH, SPEAKER, MUG])


@pytest.fixture
def settings() -> Settings:
    return Settings(
        inference_endpoint="https://test.services.ai.azure.com/models",
        chat_deployment="Phi-4-mini-instruct",
        image_endpoint="https://test.openai.azure.com",
        image_deployment="dall-e-3",
        content_safety_endpoint="https://test.cognitiveservices.azure.com",
    )


def make_completion(content):
    """Shape of an azure-ai-inference ChatCompletions response."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def make_analysis(hate=0, self_harm=0, sexual=0, violence=0):
    """Shape of an azure-ai-contentsafety AnalyzeTextResult."""
    return SimpleNamespace(
        categories_analysis=[
            SimpleNamespace(category="Hate", severity=hate),
            SimpleNamespace(category="SelfHarm", severity=self_harm),
            SimpleNamespace(category="Sexual", severity=sexual),
            SimpleNamespace(category="Violence", severity=violence),
        ]
    )


def make_image_result(url):
    """Shape of an openai ImagesResponse."""
    return SimpleNamespace(data=[SimpleNamespace(url=url)])


@pytest.fixture
def chat_client():
    client = MagicMock()
    client.complete.return_value = make_completion("The headphones cost $199.99.")
    return client


@pytest.fixture
def safety_client():
    client = MagicMock()
    client.analyze_text.return_value = make_analysis()
    return client


@pytest.fixture
def image_client():
    client = MagicMock()
    client.images.generate.return_value = make_image_result("https://images.example.com/generated.png")
    return client
