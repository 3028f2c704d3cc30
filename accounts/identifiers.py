"""
Human-readable account ID allocation.

Format: {PREFIX}-{NNNN}, e.g. PRIXT-4821, where the prefix encodes the role and
NNNN is drawn uniformly from 1000-9999. An ID is free when no account currently
holds it; the check and the caller's later write are not atomic, so two
concurrent allocations can hand out the same ID (see `audit_identifiers`).
"""
import logging
import random
import re
from dataclasses import dataclass
from enum import Enum

from .exceptions import AllocationExhausted, StoreUnavailable

logger = logging.getLogger(__name__)


ROLE_PREFIXES = {
    'participant': 'PRIXT',
    'member': 'MIXT',
    'manager': 'XMIXT',
    'admin': 'LIXT',
}

MAX_ATTEMPTS = 10
NUMBER_MIN = 1000
NUMBER_MAX = 9999

IDENTIFIER_RE = re.compile(r'^(PRIXT|MIXT|XMIXT|LIXT)-(\d{4})$')


class AllocationError(Enum):
    EXHAUSTED = 'allocation-exhausted'
    STORE_UNAVAILABLE = 'store-unavailable'


@dataclass(frozen=True)
class AllocationResult:
    """
    Outcome of one allocation: either `identifier` is set, or `error` says why not.
    `attempts` is the number of existence checks made against the store.
    """
    role: str
    identifier: str = None
    error: AllocationError = None
    attempts: int = 0
    detail: str = ''

    @property
    def ok(self):
        return self.error is None

    def unwrap(self):
        """Return the identifier or raise the matching exception."""
        if self.error is AllocationError.EXHAUSTED:
            raise AllocationExhausted(self.role, self.attempts)
        if self.error is AllocationError.STORE_UNAVAILABLE:
            raise StoreUnavailable(self.detail or 'Account store query failed')
        return self.identifier


class AccountIdentifierStore:
    """Answers "does any account hold this custom ID?" from the database."""

    def identifier_exists(self, candidate):
        from django.db import DatabaseError
        from .models import Account

        try:
            return Account.objects.filter(custom_id=candidate).exists()
        except DatabaseError as e:
            raise StoreUnavailable(str(e)) from e


def format_identifier(role, number):
    return f"{ROLE_PREFIXES[role]}-{number:04d}"


def parse_identifier(value):
    """
    Split an ID into (role, number). Returns None if the value is not a
    well-formed ID.
    """
    if not value or not isinstance(value, str):
        return None
    match = IDENTIFIER_RE.match(value.strip())
    if not match:
        return None
    prefix, digits = match.groups()
    role = next(r for r, p in ROLE_PREFIXES.items() if p == prefix)
    return role, int(digits)


def is_valid_identifier(value, role=None):
    parsed = parse_identifier(value)
    if parsed is None:
        return False
    return role is None or parsed[0] == role


class IdentifierAllocator:
    """
    Draws role-scoped IDs and checks each candidate against `store`
    until a free one is found or MAX_ATTEMPTS is reached.

    `store` needs an `identifier_exists(candidate)` method that raises
    StoreUnavailable when it cannot answer. `rng` needs `randint(a, b)`.
    """

    def __init__(self, store=None, rng=None):
        self.store = store if store is not None else AccountIdentifierStore()
        self.rng = rng if rng is not None else random.SystemRandom()

    def candidate(self, role):
        return format_identifier(role, self.rng.randint(NUMBER_MIN, NUMBER_MAX))

    def allocate(self, role):
        if role not in ROLE_PREFIXES:
            raise ValueError(f"Unknown role: {role!r}")

        attempts = 0
        while attempts < MAX_ATTEMPTS:
            custom_id = self.candidate(role)
            attempts += 1
            try:
                taken = self.store.identifier_exists(custom_id)
            except StoreUnavailable as e:
                logger.error(f"Account store unavailable while allocating {role} ID: {e}")
                return AllocationResult(
                    role=role,
                    error=AllocationError.STORE_UNAVAILABLE,
                    attempts=attempts,
                    detail=str(e),
                )
            if not taken:
                logger.info(f"Allocated {custom_id} after {attempts} attempt(s)")
                return AllocationResult(role=role, identifier=custom_id, attempts=attempts)
            logger.debug(f"ID {custom_id} already taken (attempt {attempts})")

        logger.warning(f"Unable to allocate a unique {role} ID after {attempts} attempts")
        return AllocationResult(role=role, error=AllocationError.EXHAUSTED, attempts=attempts)


def allocate_identifier(role, store=None, rng=None):
    """Allocate an ID for `role` with the default (database) store."""
    return IdentifierAllocator(store=store, rng=rng).allocate(role)
