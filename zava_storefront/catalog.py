from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable

import yaml

from .config import get_logger

logger = get_logger(__name__)

NAME_SEPARATORS = (" ", "-")
CENTS = Decimal("0.01")


class CatalogError(ValueError):
    """Raised when the product catalog cannot be loaded."""


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    price: Decimal
    description: str

    def name_words(self) -> tuple[str, ...]:
        return split_name(self.name)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": format_price(self.price),
            "description": self.description,
        }


def format_price(price: Decimal) -> str:
    """Render a price with exactly two decimals, rounding half away from zero."""
    return str(Decimal(price).quantize(CENTS, rounding=ROUND_HALF_UP))


def split_name(name: str) -> tuple[str, ...]:
    """Split a product name on spaces and hyphens, dropping empty pieces."""
    words = [name]
    for separator in NAME_SEPARATORS:
        words = [piece for word in words for piece in word.split(separator)]
    return tuple(word for word in words if word)


@dataclass(frozen=True)
class Catalog:
    """
    Read-only snapshot of the store's products, loaded once at startup.

    ``word_index`` holds the lower-cased words of every product name so that
    "headphones" matches "Wireless Noise-Canceling Headphones".
    """
    products: tuple[Product, ...]
    word_index: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "products", tuple(self.products))
        words = frozenset(word.lower() for product in self.products for word in product.name_words())
        object.__setattr__(self, "word_index", words)

    @classmethod
    def from_products(cls, products: Iterable[Product]) -> "Catalog":
        return cls(products=tuple(products))

    def __iter__(self):
        return iter(self.products)

    def __len__(self) -> int:
        return len(self.products)

    def get(self, product_id: int) -> Product | None:
        for product in self.products:
            if product.id == product_id:
                return product
        return None


def _parse_product(entry: dict, position: int) -> Product:
    if not isinstance(entry, dict):
        raise CatalogError(f"Catalog entry #{position} is not a mapping.")
    try:
        return Product(
            id=int(entry["id"]),
            name=str(entry["name"]).strip(),
            # str() first so YAML floats like 19.99 keep their written digits
            price=Decimal(str(entry["price"])),
            description=str(entry.get("description", "")).strip(),
        )
    except KeyError as exc:
        raise CatalogError(f"Catalog entry #{position} is missing field {exc}.") from exc
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise CatalogError(f"Catalog entry #{position} has an invalid value: {exc}") from exc


def load_catalog(path: str | Path) -> Catalog:
    path = Path(path)
    if not path.exists():
        raise CatalogError(f"Catalog file not found: {path}")

    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    entries = data.get("products", []) if isinstance(data, dict) else []
    products = [_parse_product(entry, position) for position, entry in enumerate(entries, start=1)]
    if not products:
        raise CatalogError(f"Catalog {path} contains no products.")

    catalog = Catalog.from_products(products)
    logger.info(f"Loaded {len(catalog)} products from {path.name}")
    return catalog
