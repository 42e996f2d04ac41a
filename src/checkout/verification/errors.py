"""Verification failures.

Every failure names the field that did not match along with the expected and
actual values, so that a failing check reads as a precise assertion message.
"""


class VerificationError(Exception):
    def __init__(self, message, field=None, expected=None, actual=None):
        super().__init__(message)
        self.field = field
        self.expected = expected
        self.actual = actual

    @classmethod
    def mismatch(cls, field, expected, actual):
        return cls(f"{field}: expected {expected!r}, got {actual!r}", field=field, expected=expected, actual=actual)


class RequestFailed(VerificationError):
    """The order placement call returned errors or an unexpected order number."""


class MissingDiscount(VerificationError):
    """No discount record was found where one was expected."""


class RuleMismatch(VerificationError):
    """The discount record names a different rule than the configured one."""


class AmountMismatch(VerificationError):
    """The discount record's amount differs from the expected amount."""


class AddressNotFound(VerificationError):
    """No cart address of the requested type exists."""


class CartNotFound(VerificationError):
    """No cart matches the reserved order id."""
