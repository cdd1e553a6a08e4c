"""
Hit Songs API — Parameter Validator
====================================

What:  Normalizes raw path parameters before a query is built.
Why:   The mood routes accept an optional row count; a bad value must be
       rejected (or reset) before anything is sent to the remote service.

Count policy:
    absent              → 20
    not an integer      → InvalidParameterError (HTTP 400, no remote call);
                          only an optional sign and ASCII digits count
    outside [1, 20]     → 20 (reset to the default, not clamped to a bound)
    inside [1, 20]      → unchanged

Identifier, substring and year parameters are not touched here; the remote
query layer escapes them.
"""

import re
from typing import Optional

from hitsongs.exceptions import InvalidParameterError

DEFAULT_COUNT = 20
MIN_COUNT = 1
MAX_COUNT = 20

# int() alone also accepts "1_0", " 5 " and non-ASCII digits
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+", re.ASCII)


def parse_count(raw: Optional[str], parameter: str = "ref") -> int:
    """
    Parse the optional row-count path parameter.

    Args:
        raw: The raw path segment, or None when the route was called without it.
        parameter: Parameter name used in the error message.

    Raises:
        InvalidParameterError: `raw` is present but not an integer.
    """
    if raw is None or raw == "":
        return DEFAULT_COUNT

    if not _INTEGER_PATTERN.fullmatch(raw):
        raise InvalidParameterError(parameter=parameter, value=raw)

    count = int(raw)

    if count < MIN_COUNT or count > MAX_COUNT:
        return DEFAULT_COUNT
    return count
