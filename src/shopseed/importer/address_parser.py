"""
shopseed.importer.address_parser - Split a free-text US address.

Grammar (comma-space separated segments):

    <street segments...>, <city>, <ST> <ZIP5>

The last segment carries a two-letter state and a five-digit zip, the
one before it is the city, everything earlier is the street.  Addresses
with a unit segment after the city or a spelled-out state do not fit and
are rejected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from shopseed.core.exceptions import InvalidAddressFormat, InvalidStateZipFormat

SEPARATOR = ", "
COUNTRY = "USA"
STATE_ZIP = re.compile(r"([A-Z]{2})\s+(\d{5})")


@dataclass(frozen=True)
class ParsedAddress:
    street: str
    city: str
    state: str
    zip_code: str
    country: str = COUNTRY


def parse_address(address: str) -> ParsedAddress:
    """Raises InvalidAddressFormat or InvalidStateZipFormat."""
    parts = address.split(SEPARATOR)
    if len(parts) < 2:
        raise InvalidAddressFormat(address)

    state_zip = STATE_ZIP.search(parts[-1])
    if not state_zip:
        raise InvalidStateZipFormat(parts[-1])

    return ParsedAddress(
        street=SEPARATOR.join(parts[:-2]),
        city=parts[-2],
        state=state_zip.group(1),
        zip_code=state_zip.group(2),
    )


def format_address(parsed: ParsedAddress) -> str:
    """Inverse of parse_address for well-formed input."""
    return f"{parsed.street}, {parsed.city}, {parsed.state} {parsed.zip_code}"
