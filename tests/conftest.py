"""Shared fixtures for smartinv tests."""

from __future__ import annotations

import pytest

from fakes import FakeInventories


@pytest.fixture
def inventories() -> FakeInventories:
    """A fake API holding smart inventory 42 ("Web servers")."""
    fake = FakeInventories()
    fake.add(42, "Web servers")
    return fake
