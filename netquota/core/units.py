# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Quota magnitude parsing.

Accepted tokens are decimal digits with an optional unit suffix:

    500     -> 500 MB
    500m    -> 500 MB
    3g      -> 3072 MB
"""

import logging
import re
from typing import Any

from .exceptions import ParseError
from .models import MB_PER_GB, QuotaMagnitude

logger = logging.getLogger("netquota.units")

# ASCII digits only; \d would also accept other unicode digits
QUOTA_PATTERN = re.compile(r"([0-9]+)([gm]?)")


def parse_quota(token: Any) -> QuotaMagnitude:
    """
    Parse a quota token into megabytes.

    Args:
        token: Digits optionally followed by "g" (gigabytes) or "m" (megabytes)

    Returns:
        QuotaMagnitude

    Raises:
        ParseError: If the token is not a valid quota magnitude
    """
    if not isinstance(token, str):
        raise ParseError(token)

    match = QUOTA_PATTERN.fullmatch(token)
    if match is None:
        logger.debug(f"Rejected quota token {token!r}")
        raise ParseError(token)

    megabytes = int(match.group(1))
    if match.group(2) == "g":
        megabytes *= MB_PER_GB

    return QuotaMagnitude(megabytes=megabytes)
