"""Postie -- email address parsing.

Top-level convenience re-exports::

    from postie import Address, parse_address
    from postie.address import addr_spec, ParserSettings  # full API
"""

__version__ = "0.1.0"

from postie.address import Address, address, address_literal, parse_address, to_bytes

__all__ = [
    "__version__",
    "Address",
    "address",
    "address_literal",
    "parse_address",
    "to_bytes",
]
