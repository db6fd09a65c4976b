from __future__ import annotations

import re
from typing import Iterable

from .catalog import Catalog, Product

# Words that always indicate a shopping context regardless of specific product names.
DEFAULT_SHOPPING_KEYWORDS = frozenset({
    "buy", "purchase", "price", "cost", "cheap", "expensive", "recommend", "suggest",
    "compare", "difference", "feature", "spec", "review", "worth", "order", "ship",
    "deliver", "return", "warranty", "stock", "available", "product", "item", "store",
    "shop", "cart", "deal", "discount", "sale", "gift",
})

# Catalog words shorter than this are too noisy to count as a match ("the", "for").
MIN_WORD_LENGTH = 4

_TOKEN_SEPARATORS = re.compile(r"[ ,.?!\n-]")


def tokenize(message: str) -> list[str]:
    """Split a customer message on spaces, punctuation, newlines and hyphens."""
    return [token for token in _TOKEN_SEPARATORS.split(message) if token]


class RelevanceGuard:
    """
    Decides whether a message is about the store and which products it mentions.

    Built once from the catalog snapshot; every decision is a pure function of the
    message, the catalog word index and the keyword set.
    """

    def __init__(self, catalog: Catalog, shopping_keywords: Iterable[str] | None = None) -> None:
        self._catalog = catalog
        keywords = shopping_keywords if shopping_keywords else DEFAULT_SHOPPING_KEYWORDS
        self._shopping_keywords = frozenset(keyword.lower() for keyword in keywords)

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def shopping_keywords(self) -> frozenset[str]:
        return self._shopping_keywords

    def is_related_to_store(self, message: str) -> bool:
        words = [word.lower() for word in tokenize(message)]

        # any word of a product name, e.g. "headphones"
        if any(len(word) >= MIN_WORD_LENGTH and word in self._catalog.word_index for word in words):
            return True

        return any(word in self._shopping_keywords for word in words)

    def find_relevant_products(self, message: str) -> tuple[Product, ...]:
        words = {word.lower() for word in tokenize(message) if len(word) >= MIN_WORD_LENGTH}
        return tuple(
            product
            for product in self._catalog
            if any(name_word.lower() in words for name_word in product.name_words())
        )

    def select_context(self, message: str) -> tuple[Product, ...]:
        """Products to ground the answer on; the whole catalog when nothing matches."""
        return self.find_relevant_products(message) or self._catalog.products
