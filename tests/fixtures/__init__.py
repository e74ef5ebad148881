"""Test fixtures for Kitchen Ledger."""

from tests.fixtures.mocks import InMemoryIngredientStore

__all__ = [
    "InMemoryIngredientStore",
]
