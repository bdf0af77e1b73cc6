"""Postie address exception hierarchy.

All address-specific exceptions inherit from :class:`PostieError`.
"""

from __future__ import annotations


class PostieError(Exception):
    """Base exception for all postie address errors."""


class GrammarError(PostieError):
    """Raised when input does not match an addr-spec production.

    ``position`` is the byte offset at which the failing production was
    attempted and ``expected`` names that production.
    """

    def __init__(self, expected: str = "", position: int = 0) -> None:
        self.expected = expected
        self.position = position
        if expected:
            super().__init__(f"expected {expected} at offset {position}")
        else:
            super().__init__()


class InputTooLargeError(GrammarError):
    """Raised when input exceeds the configured maximum length."""


class CommentTooDeepError(GrammarError):
    """Raised when comments nest deeper than the configured maximum."""


class InvalidAddressError(PostieError):
    """Raised when an address literal fails to parse."""
