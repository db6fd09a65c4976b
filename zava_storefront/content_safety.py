from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from azure.ai.contentsafety import ContentSafetyClient
from azure.ai.contentsafety.models import AnalyzeTextOptions
from opentelemetry import trace

from .config import Settings, get_logger

logger = get_logger(__name__)
tracer = trace.get_tracer(__name__)

# Any single category at or above this severity blocks the whole prompt.
SEVERITY_THRESHOLD = 2

CATEGORIES = ("Hate", "SelfHarm", "Sexual", "Violence")


@dataclass(frozen=True)
class SafetyVerdict:
    severities: dict[str, int] = field(default_factory=dict)

    @property
    def triggered(self) -> tuple[str, ...]:
        return tuple(
            category for category, severity in self.severities.items() if severity >= SEVERITY_THRESHOLD
        )

    @property
    def blocked(self) -> bool:
        return bool(self.triggered)


def _category_name(category: Any) -> str:
    # TextCategory is a str enum; its value is the service's category name
    return str(getattr(category, "value", category))


def evaluate(severities: dict[str, int]) -> SafetyVerdict:
    scores = {category: 0 for category in CATEGORIES}
    scores.update({category: int(severity or 0) for category, severity in severities.items()})
    return SafetyVerdict(severities=scores)


class ContentSafetyGate:
    """Classifies prompt text with Azure AI Content Safety before it reaches a model."""

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings, credential) -> "ContentSafetyGate":
        client = ContentSafetyClient(
            settings.content_safety_endpoint,
            credential,
            credential_scopes=[settings.token_scope],
            connection_timeout=settings.request_timeout_seconds,
            read_timeout=settings.request_timeout_seconds,
            retry_total=0,
        )
        return cls(client)

    @tracer.start_as_current_span(name="content_safety_classify")
    def classify(self, prompt: str) -> SafetyVerdict:
        result = self._client.analyze_text(AnalyzeTextOptions(text=prompt))
        verdict = evaluate(
            {_category_name(item.category): item.severity for item in (result.categories_analysis or [])}
        )

        for category, severity in verdict.severities.items():
            logger.info(f"ContentSafety: category={category} severity={severity}")

        if verdict.blocked:
            for category in verdict.triggered:
                logger.info(
                    f"ContentSafety: result=BLOCKED category={category} severity={verdict.severities[category]}"
                )
        else:
            logger.info(f"ContentSafety: result=PASS prompt_length={len(prompt)}")
        return verdict
