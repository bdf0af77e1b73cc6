"""Postie address -- RFC 5322 addr-spec parsing.

Public API re-exports for ``postie.address``.
"""

from postie.address.errors import (
    PostieError,
    GrammarError,
    InputTooLargeError,
    CommentTooDeepError,
    InvalidAddressError,
)

from postie.address.config import (
    DEFAULT_SETTINGS,
    ParserSettings,
)

from postie.address.address import (
    Address,
    address,
    to_bytes,
    iter_chunks,
    addr_spec,
    parse_address,
    address_literal,
)

__all__ = [
    # Errors
    "PostieError",
    "GrammarError",
    "InputTooLargeError",
    "CommentTooDeepError",
    "InvalidAddressError",
    # Config
    "DEFAULT_SETTINGS",
    "ParserSettings",
    # Address
    "Address",
    "address",
    "to_bytes",
    "iter_chunks",
    "addr_spec",
    "parse_address",
    "address_literal",
]
