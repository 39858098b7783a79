"""Shared fixtures for cachetier tests."""

import pytest

from cachetier.adapters import MemoryCacheStateAdapter, MemoryStorageAdapter, NoopMetricsAdapter
from cachetier.core import CachedStorage


@pytest.fixture
def remote():
    return MemoryStorageAdapter(label="remote")


@pytest.fixture
def local():
    return MemoryStorageAdapter(label="local")


@pytest.fixture
def cache_state():
    return MemoryCacheStateAdapter()


@pytest.fixture
def service(remote, local, cache_state):
    return CachedStorage(remote, local, cache_state, metrics=NoopMetricsAdapter())
