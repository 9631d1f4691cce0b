"""Pytest configuration and fixtures."""

import os
import uuid

import pytest

from typed_env import EnvironmentVariableAccessor, MappingEnvironmentStore, Scope


@pytest.fixture
def store() -> MappingEnvironmentStore:
    """An isolated in-memory store."""
    return MappingEnvironmentStore()


@pytest.fixture
def accessor(store: MappingEnvironmentStore) -> EnvironmentVariableAccessor:
    """An accessor over the in-memory store."""
    return EnvironmentVariableAccessor(Scope.PROCESS, store=store)


@pytest.fixture
def process_var():
    """A unique process environment variable name, removed after the test."""
    name = f"TYPED_ENV_TEST_{uuid.uuid4().hex.upper()}"
    try:
        yield name
    finally:
        os.environ.pop(name, None)
