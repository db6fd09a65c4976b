"""Zava Storefront AI backend: grounded store assistant and safe product image generation."""

__version__ = "1.0.0"
