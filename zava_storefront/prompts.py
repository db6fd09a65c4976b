from __future__ import annotations

from typing import Iterable

from .catalog import Product, format_price

STORE_NAME = "ZavaStorefront"

# Static; never contains user data.
SYSTEM_PROMPT = (
    f"You are a shopping assistant for {STORE_NAME}. "
    "Answer customer questions strictly and only from the product context provided to you. "
    "Never use outside knowledge."
)

NOT_AVAILABLE_REPLY = "That product is not available in our store."

# The customer's text always follows the catalog and the grounding heading.
GROUNDED_USER_TEMPLATE = (
    "STORE CATALOG (answer ONLY from this — no outside knowledge):\n"
    "{context}\n"
    "\n"
    "Customer question: {question}\n"
    "\n"
    "Answer using only the catalog above. If the product is not listed, "
    'say: "{not_available}"'
)


def format_product_line(product: Product) -> str:
    return f"- {product.name} (${format_price(product.price)}): {product.description}"


def build_context_block(products: Iterable[Product]) -> str:
    return "\n".join(format_product_line(product) for product in products)


def build_grounded_message(products: Iterable[Product], question: str) -> str:
    context = build_context_block(products)
    if not context:
        raise ValueError("Grounding context must contain at least one product.")
    # str.format does not re-scan substituted values, so braces in the question are safe
    return GROUNDED_USER_TEMPLATE.format(
        context=context,
        question=question,
        not_available=NOT_AVAILABLE_REPLY,
    )


def build_messages(products: Iterable[Product], question: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_grounded_message(products, question)},
    ]
