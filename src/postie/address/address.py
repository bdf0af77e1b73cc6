"""Email address value type, parsing and serialization.

An :class:`Address` holds the local part and the domain of an RFC 5322
addr-spec as raw bytes.  Parsing drops comments and folding whitespace,
so the canonical form ``local_part + b"@" + domain`` carries no
decoration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from postie.address import grammar
from postie.address.config import DEFAULT_SETTINGS, ParserSettings
from postie.address.errors import GrammarError, InputTooLargeError, InvalidAddressError

logger = logging.getLogger(__name__)

BytesLike = bytes | bytearray | memoryview | str


def _as_bytes(value: BytesLike) -> bytes:
    """Return *value* as bytes; ``str`` maps each code point to one byte."""
    if isinstance(value, str):
        return value.encode("latin-1")
    return bytes(value)


@dataclass(frozen=True, order=True)
class Address:
    """An email address split into local part and domain.

    Equality and ordering compare the local part first, then the domain,
    as raw byte strings.
    """

    local_part: bytes
    domain: bytes

    def __bytes__(self) -> bytes:
        return to_bytes(self)

    def __str__(self) -> str:
        return to_bytes(self).decode("latin-1")


def address(local_part: BytesLike, domain: BytesLike) -> Address:
    """Build an :class:`Address` without validating either part.

    Callers are responsible for passing grammatical parts; use
    :func:`parse_address` for untrusted input.
    """
    return Address(_as_bytes(local_part), _as_bytes(domain))


def to_bytes(addr: Address) -> bytes:
    """Serialize *addr* as ``local_part@domain``."""
    return b"".join(iter_chunks(addr))


def iter_chunks(addr: Address) -> Iterator[bytes]:
    """Yield the serialized form of *addr* chunk by chunk."""
    yield addr.local_part
    yield b"@"
    yield addr.domain


def addr_spec(
    data: BytesLike,
    pos: int = 0,
    settings: ParserSettings | None = None,
) -> tuple[Address, int]:
    """Parse an addr-spec starting at *pos*.

    Returns the address and the offset just past the consumed input.
    Bytes after the domain are not examined.

    Raises:
        GrammarError: If *data* does not start with a valid addr-spec.
        UnicodeEncodeError: If *data* is a ``str`` with code points
            above U+00FF.
    """
    settings = settings or DEFAULT_SETTINGS
    data = _as_bytes(data)
    limit = settings.max_input_length
    if limit is not None and len(data) > limit:
        raise InputTooLargeError(f"input of at most {limit} bytes", limit)

    cur = grammar.Cursor(data, pos, settings)
    local_part, domain = grammar.addr_spec(cur)
    if not cur.at_end:
        logger.debug(
            "Ignoring %d trailing bytes after addr-spec: %r",
            len(data) - cur.pos,
            data[cur.pos:],
        )
    return Address(local_part, domain), cur.pos


def parse_address(
    data: BytesLike, settings: ParserSettings | None = None
) -> Address | None:
    """Parse *data* as an RFC 5322 addr-spec.

    Returns None on any mismatch.  Trailing input after a valid
    addr-spec is ignored.
    """
    try:
        addr, _ = addr_spec(data, settings=settings)
    except UnicodeEncodeError:
        logger.debug("Rejected address %r: not a byte string", data)
        return None
    except GrammarError as exc:
        logger.debug("Rejected address %r: %s", data, exc)
        return None
    return addr


def address_literal(text: BytesLike) -> Address:
    """Parse a trusted constant address, typically at import time.

    Raises:
        InvalidAddressError: If *text* is not a valid addr-spec.  This
            signals a programming error, not bad user input.
    """
    addr = parse_address(text)
    if addr is None:
        raise InvalidAddressError(f"Invalid address literal: {text!r}")
    return addr
