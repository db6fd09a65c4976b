from __future__ import annotations

from typing import Any

from azure.core.credentials import AccessToken, TokenCredential
from azure.identity import DefaultAzureCredential, get_bearer_token_provider

from .config import DEFAULT_TOKEN_SCOPE


class CognitiveServicesCredential:
    """
    Token credential pinned to the Azure AI Services audience.

    The inference and OpenAI SDKs derive a scope from the endpoint URL
    (e.g. "https://<resource>.cognitiveservices.azure.com/models/.default"),
    which the service rejects. This wrapper ignores the requested scopes and
    always asks the inner credential for the fixed one. The inner credential is
    DefaultAzureCredential: managed identity in App Service, Azure CLI locally.
    No API key is ever sent.
    """

    def __init__(self, scope: str = DEFAULT_TOKEN_SCOPE, inner: TokenCredential | None = None) -> None:
        self.scope = scope
        self._inner = inner if inner is not None else DefaultAzureCredential()

    def get_token(self, *scopes: str, **kwargs: Any) -> AccessToken:
        return self._inner.get_token(self.scope, **kwargs)

    def bearer_token_provider(self):
        """Callable returning a bearer token, for clients that take azure_ad_token_provider."""
        return get_bearer_token_provider(self._inner, self.scope)
