"""
Shared Schema Types

Decimal-backed amount type used by every engine model. Values stay
Decimal in Python and serialize to plain floats in JSON output.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

Amount = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
