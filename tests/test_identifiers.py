import re

import pytest
from django.db import DatabaseError

from accounts.exceptions import AllocationExhausted, StoreUnavailable
from accounts.identifiers import (
    AccountIdentifierStore,
    AllocationError,
    IdentifierAllocator,
    MAX_ATTEMPTS,
    ROLE_PREFIXES,
    is_valid_identifier,
    parse_identifier,
)
from accounts.models import Account

from .conftest import BrokenStore, FakeStore, ScriptedRandom

ID_RE = re.compile(r"^(PRIXT|MIXT|XMIXT|LIXT)-\d{4}$")


@pytest.mark.parametrize("role,prefix", [
    ("participant", "PRIXT"),
    ("member", "MIXT"),
    ("manager", "XMIXT"),
    ("admin", "LIXT"),
])
def test_allocate_uses_role_prefix(role, prefix):
    result = IdentifierAllocator(store=FakeStore()).allocate(role)

    assert result.ok
    assert ID_RE.match(result.identifier)
    assert result.identifier.startswith(prefix + "-")


def test_number_is_drawn_from_four_digit_range():
    rng = ScriptedRandom([1000, 9999])
    allocator = IdentifierAllocator(store=FakeStore(), rng=rng)

    assert allocator.allocate("member").identifier == "MIXT-1000"
    assert allocator.allocate("member").identifier == "MIXT-9999"
    assert rng.calls == [(1000, 9999), (1000, 9999)]


def test_default_random_source_stays_in_range():
    allocator = IdentifierAllocator(store=FakeStore())
    for _ in range(200):
        number = int(allocator.allocate("participant").identifier.split("-")[1])
        assert 1000 <= number <= 9999


def test_exhausted_after_exactly_ten_checks():
    store = FakeStore(everything_taken=True)
    result = IdentifierAllocator(store=store).allocate("participant")

    assert not result.ok
    assert result.error is AllocationError.EXHAUSTED
    assert result.identifier is None
    assert result.attempts == MAX_ATTEMPTS == 10
    assert len(store.queries) == 10
    with pytest.raises(AllocationExhausted):
        result.unwrap()


def test_returns_fourth_candidate_after_three_collisions():
    store = FakeStore(taken={"MIXT-1111", "MIXT-2222", "MIXT-3333"})
    rng = ScriptedRandom([1111, 2222, 3333, 4444])

    result = IdentifierAllocator(store=store, rng=rng).allocate("member")

    assert result.unwrap() == "MIXT-4444"
    assert result.attempts == 4
    assert store.queries == ["MIXT-1111", "MIXT-2222", "MIXT-3333", "MIXT-4444"]


def test_second_allocation_sees_first_result():
    store = FakeStore()
    allocator = IdentifierAllocator(store=store, rng=ScriptedRandom([5000, 5000, 6000]))

    first = allocator.allocate("participant").unwrap()
    store.taken.add(first)
    second = allocator.allocate("participant").unwrap()

    assert first == "PRIXT-5000"
    assert second == "PRIXT-6000"
    assert first != second


def test_member_on_empty_store_needs_one_query():
    store = FakeStore()
    result = IdentifierAllocator(store=store).allocate("member")

    assert re.match(r"^MIXT-\d{4}$", result.identifier)
    assert len(store.queries) == 1


def test_admin_collision_then_success():
    store = FakeStore(taken={"LIXT-1000"})
    rng = ScriptedRandom([1000, 2000])

    result = IdentifierAllocator(store=store, rng=rng).allocate("admin")

    assert result.identifier == "LIXT-2000"
    assert result.attempts == 2
    assert store.queries == ["LIXT-1000", "LIXT-2000"]


def test_store_failure_is_reported_without_retrying():
    store = BrokenStore()
    result = IdentifierAllocator(store=store).allocate("manager")

    assert result.error is AllocationError.STORE_UNAVAILABLE
    assert result.attempts == 1
    assert store.queries == 1
    assert "connection refused" in result.detail
    with pytest.raises(StoreUnavailable):
        result.unwrap()


def test_unknown_role_is_rejected():
    with pytest.raises(ValueError):
        IdentifierAllocator(store=FakeStore()).allocate("guest")


def test_role_prefixes_are_fixed():
    assert ROLE_PREFIXES == {
        "participant": "PRIXT",
        "member": "MIXT",
        "manager": "XMIXT",
        "admin": "LIXT",
    }


def test_parse_and_validate_identifier():
    assert parse_identifier("XMIXT-0101") == ("manager", 101)
    assert parse_identifier(" MIXT-0001 ") == ("member", 1)
    assert parse_identifier("MIXT-123") is None
    assert parse_identifier("ABC-1234") is None
    assert parse_identifier(None) is None

    assert is_valid_identifier("LIXT-0000")
    assert is_valid_identifier("LIXT-0000", role="admin")
    assert not is_valid_identifier("LIXT-0000", role="member")


@pytest.mark.django_db
def test_database_store_checks_existing_accounts(make_account):
    make_account(role="member", custom_id="MIXT-4242")
    store = AccountIdentifierStore()

    assert store.identifier_exists("MIXT-4242")
    assert not store.identifier_exists("MIXT-4243")


@pytest.mark.django_db
def test_database_store_wraps_database_errors(monkeypatch):
    def broken_filter(*args, **kwargs):
        raise DatabaseError("database is locked")

    monkeypatch.setattr(Account.objects, "filter", broken_filter)

    with pytest.raises(StoreUnavailable):
        AccountIdentifierStore().identifier_exists("PRIXT-1000")

    result = IdentifierAllocator().allocate("participant")
    assert result.error is AllocationError.STORE_UNAVAILABLE
