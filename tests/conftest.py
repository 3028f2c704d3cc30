import itertools

import pytest
from django.contrib.auth import get_user_model

from accounts.exceptions import StoreUnavailable
from accounts.identifiers import IdentifierAllocator
from accounts.models import Account
from accounts import services

PASSWORD = "Vx9-Portal-Key"


class FakeStore:
    """In-memory identifier store that records every existence check."""

    def __init__(self, taken=(), everything_taken=False):
        self.taken = set(taken)
        self.everything_taken = everything_taken
        self.queries = []

    def identifier_exists(self, candidate):
        self.queries.append(candidate)
        return self.everything_taken or candidate in self.taken


class BrokenStore:
    def __init__(self):
        self.queries = 0

    def identifier_exists(self, candidate):
        self.queries += 1
        raise StoreUnavailable("connection refused")


class ScriptedRandom:
    """randint() returns the scripted numbers in order, then repeats the last one."""

    def __init__(self, numbers):
        self.numbers = list(numbers)
        self._it = itertools.chain(self.numbers, itertools.repeat(self.numbers[-1]))
        self.calls = []

    def randint(self, a, b):
        self.calls.append((a, b))
        value = next(self._it)
        assert a <= value <= b
        return value


@pytest.fixture
def scripted_allocator():
    """Database-backed allocator drawing the given numbers."""
    def _make(*numbers):
        return IdentifierAllocator(rng=ScriptedRandom(numbers))
    return _make


@pytest.fixture
def make_account(db):
    """Create an account directly, bypassing allocation (for fixtures and duplicates)."""
    counter = itertools.count(1)

    def _make(role="participant", custom_id=None, name=None, **fields):
        n = next(counter)
        email = fields.pop("email", f"user{n}@example.com")
        user = get_user_model().objects.create_user(
            username=email, email=email, password=PASSWORD, is_staff=(role == "admin")
        )
        return Account.objects.create(
            user=user,
            role=role,
            custom_id=custom_id or f"PRIXT-{1000 + n}",
            full_name=name or f"User {n}",
            **fields,
        )
    return _make


@pytest.fixture
def admin_account(db):
    return services.create_admin(
        "admin@infixttech.com", PASSWORD, {"name": "Admin User"}, custom_id="LIXT-0000"
    )
