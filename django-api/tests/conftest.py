"""Pytest configuration and shared fixtures."""

import pytest
from django.contrib.auth.models import Group
from rest_framework.test import APIClient

from factories import build_event
from events.stores.memory_store import MemoryCheckInSessionStore, MemoryEventStore


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def memory_store() -> MemoryEventStore:
    return MemoryEventStore()


@pytest.fixture
def session_store() -> MemoryCheckInSessionStore:
    return MemoryCheckInSessionStore()


@pytest.fixture
def small_event(memory_store):
    """A two-seat event titled "My Event" held in the memory store."""
    event = build_event(capacity=2, title="My Event")
    memory_store.add_event(event)
    return event


@pytest.fixture
def member(django_user_model):
    return django_user_model.objects.create_user(
        username="alice",
        email="alice@example.com",
        password="pw",
        first_name="Alice",
    )


@pytest.fixture
def operator(django_user_model):
    user = django_user_model.objects.create_user(
        username="door", email="door@example.com", password="pw"
    )
    group, _ = Group.objects.get_or_create(name="event-admins")
    user.groups.add(group)
    return user


@pytest.fixture
def member_client(api_client, member) -> APIClient:
    api_client.force_authenticate(user=member)
    return api_client


@pytest.fixture
def operator_client(operator) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=operator)
    return client
