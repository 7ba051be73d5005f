"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone

import pytest
from rest_framework.test import APIClient

from attendance.stores.memory_store import MemoryDatabase, memory_stores
from attendance.wiring import build_services

FIXED_NOW = datetime(2025, 7, 10, 20, 30, tzinfo=timezone.utc)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def memory_db() -> MemoryDatabase:
    return MemoryDatabase()


@pytest.fixture
def stores(memory_db):
    return memory_stores(memory_db)


@pytest.fixture
def services(stores):
    return build_services(stores, clock=lambda: FIXED_NOW)


@pytest.fixture
def orm_services():
    from attendance.stores.django_store import django_stores

    return build_services(django_stores(), clock=lambda: FIXED_NOW)
