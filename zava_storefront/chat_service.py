from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from azure.ai.inference import ChatCompletionsClient
from opentelemetry import trace

from .catalog import Catalog
from .config import Settings, get_logger
from .prompts import build_messages
from .relevance import RelevanceGuard

# initialize logging and tracing objects
logger = get_logger(__name__)
tracer = trace.get_tracer(__name__)

OUT_OF_SCOPE_REPLY = (
    "I'm here to help you with ZavaStorefront products only. "
    "Is there anything I can help you find in our store?"
)
FALLBACK_REPLY = (
    "Sorry, I'm having trouble connecting to the assistant right now. "
    "Please try again in a moment."
)

# Deterministic decoding; answers stay on the supplied facts.
CHAT_TEMPERATURE = 0


class ReplyOrigin(str, Enum):
    GROUNDED = "grounded"
    OUT_OF_SCOPE = "out_of_scope"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class Fault:
    kind: str
    message: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> "Fault":
        return cls(kind=type(exc).__name__, message=str(exc))


@dataclass(frozen=True)
class ChatReply:
    text: str
    origin: ReplyOrigin
    fault: Fault | None = None


def _extract_content(response: Any) -> str:
    choices = getattr(response, "choices", None)
    if not choices:
        raise ValueError("Chat completion response contained no choices.")
    return choices[0].message.content or ""


class ChatService:
    """
    Store assistant backed by a remote chat-completions deployment.

    Off-topic messages are answered locally with a redirect. In-scope messages are
    grounded on the matching catalog entries. Transport failures never escape
    ``get_response``; they come back as a fallback reply carrying the fault.
    """

    def __init__(
        self,
        client: Any,
        catalog: Catalog,
        deployment: str,
        *,
        max_tokens: int = 300,
        shopping_keywords: tuple[str, ...] | None = None,
    ) -> None:
        self._client = client
        self._deployment = deployment
        self._max_tokens = max_tokens
        self.guard = RelevanceGuard(catalog, shopping_keywords)

    @classmethod
    def from_settings(cls, settings: Settings, catalog: Catalog, credential) -> "ChatService":
        client = ChatCompletionsClient(
            endpoint=settings.inference_endpoint,
            credential=credential,
            credential_scopes=[settings.token_scope],
            connection_timeout=settings.request_timeout_seconds,
            read_timeout=settings.request_timeout_seconds,
            retry_total=0,
        )
        logger.info(f"ChatService: initialized endpoint={settings.inference_endpoint} deployment={settings.chat_deployment}")
        return cls(
            client,
            catalog,
            settings.chat_deployment,
            max_tokens=settings.chat_max_tokens,
            shopping_keywords=settings.shopping_keywords,
        )

    @tracer.start_as_current_span(name="chat_get_response")
    def get_response(self, message: str) -> ChatReply:
        # Server-side relevance guard: off-topic requests never reach the model.
        if not self.guard.is_related_to_store(message):
            logger.info(f"ChatService: out of scope, message length={len(message)}")
            return ChatReply(text=OUT_OF_SCOPE_REPLY, origin=ReplyOrigin.OUT_OF_SCOPE)

        products = self.guard.select_context(message)
        messages = build_messages(products, message)
        logger.debug(f"ChatService: grounding on {len(products)} products")

        try:
            response = self._client.complete(
                model=self._deployment,
                messages=messages,
                max_tokens=self._max_tokens,
                temperature=CHAT_TEMPERATURE,
            )
            text = _extract_content(response)
        except Exception as exc:
            fault = Fault.from_exception(exc)
            logger.error(f"ChatService: error calling AI: {fault.kind}: {fault.message}")
            return ChatReply(text=FALLBACK_REPLY, origin=ReplyOrigin.FALLBACK, fault=fault)

        logger.info(f"ChatService: reply generated, message length={len(message)} reply length={len(text)}")
        return ChatReply(text=text, origin=ReplyOrigin.GROUNDED)
