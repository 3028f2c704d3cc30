"""
Exceptions raised by account services and the identifier allocator.
"""


class IdentifierError(Exception):
    """Base class for identifier allocation failures."""
    code = 'identifier-error'
    message = 'Could not assign an account ID'


class AllocationExhausted(IdentifierError):
    """Every attempt produced an ID that is already taken."""
    code = 'allocation-exhausted'
    message = 'Unable to generate a unique ID right now. Please try again.'

    def __init__(self, role, attempts):
        self.role = role
        self.attempts = attempts
        super().__init__(f"No free {role} ID after {attempts} attempts")


class StoreUnavailable(IdentifierError):
    """The account store could not be queried."""
    code = 'store-unavailable'
    message = 'The account database is unavailable. Please try again later.'


class AccountServiceError(Exception):
    """
    User-facing account failure with a stable error code
    (e.g. 'email-already-in-use', 'permission-denied').
    """

    def __init__(self, code, message):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")
