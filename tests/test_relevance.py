"""
Tests for the store relevance guard and product context selection
"""
import pytest

from zava_storefront.catalog import Catalog
from zava_storefront.relevance import DEFAULT_SHOPPING_KEYWORDS, RelevanceGuard, tokenize

from conftest import HEADPHONES, MUG, SPEAKER, WATCH


def test_tokenize_splits_on_punctuation_and_hyphens():
    assert tokenize("Noise-canceling, please! Really?\nYes.") == [
        "Noise", "canceling", "please", "Really", "Yes",
    ]
    assert tokenize("  ,,  ") == []


@pytest.mark.parametrize("message", [
    "What's the price?",
    "Any DISCOUNT today",
    "can I buy this",
    "gift ideas",
    "Is there a warranty",
])
def test_shopping_keyword_is_in_scope_regardless_of_catalog(message):
    guard = RelevanceGuard(Catalog.from_products([MUG]))
    assert guard.is_related_to_store(message) is True


def test_catalog_word_matches_case_insensitively(catalog):
    guard = RelevanceGuard(catalog)
    assert guard.is_related_to_store("tell me about HEADPHONES") is True
    assert guard.is_related_to_store("anything wireless?") is True
    assert guard.is_related_to_store("I want something portable") is True


def test_short_catalog_words_do_not_match(catalog):
    guard = RelevanceGuard(catalog)
    # "Tea" and "Mug" are catalog words but shorter than four characters
    assert guard.is_related_to_store("tea mug") is False


def test_unrelated_message_is_out_of_scope(catalog):
    guard = RelevanceGuard(catalog)
    assert guard.is_related_to_store("What's the weather today?") is False


def test_keywords_are_configurable(catalog):
    guard = RelevanceGuard(catalog, shopping_keywords=["Refund"])
    assert guard.shopping_keywords == frozenset({"refund"})
    assert guard.is_related_to_store("refund please") is True
    assert guard.is_related_to_store("what does it cost") is False


def test_default_keywords_are_used_when_none_configured(catalog):
    assert RelevanceGuard(catalog, shopping_keywords=()).shopping_keywords == DEFAULT_SHOPPING_KEYWORDS


def test_find_relevant_products_preserves_catalog_order(catalog):
    guard = RelevanceGuard(catalog)
    products = guard.find_relevant_products("speaker or headphones or watch?")
    assert products == (HEADPHONES, WATCH, SPEAKER)


def test_find_relevant_products_matches_hyphenated_name_words(catalog):
    guard = RelevanceGuard(catalog)
    assert guard.find_relevant_products("is it noise canceling") == (HEADPHONES,)


def test_find_relevant_products_ignores_short_words(catalog):
    guard = RelevanceGuard(catalog)
    assert guard.find_relevant_products("tea mug") == ()


def test_select_context_falls_back_to_full_catalog(catalog):
    guard = RelevanceGuard(catalog)
    assert guard.find_relevant_products("what's your best deal") == ()
    assert guard.select_context("what's your best deal") == catalog.products


def test_select_context_returns_matches_only(catalog):
    guard = RelevanceGuard(catalog)
    assert guard.select_context("What's the price of the headphones?") == (HEADPHONES,)
