"""
Value extraction and normalization.

Turns an upstream response body into a fixed-point integer:

    body --parse_json--> document --extract_first--> element
         --to_decimal--> Decimal --scale--> int (U256)

JSON numbers are parsed straight into Decimal and scaling is done with
exact rational arithmetic, so floor(v * 10**decimal) is bit-exact for
any price and exponent.
"""

import json
import logging
import math
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import Any, Optional

from jsonpath_ng import parse as parse_jsonpath
from jsonpath_ng.exceptions import JSONPathError

from .base import to_u256
from .errors import ConfigError, DataNotFound, NumericFormatError, ParseError

logger = logging.getLogger(__name__)


def parse_json(text: str, source: Optional[str] = None) -> Any:
    """Parse a response body, keeping JSON numbers exact."""
    try:
        return json.loads(text, parse_float=Decimal)
    except (ValueError, TypeError) as e:
        raise ParseError(f"response is not valid JSON: {e}", source=source) from e


def compile_path(expression: str, source: Optional[str] = None):
    """Compile a JSON-path query such as "$.data.price" or "$..*"."""
    if not isinstance(expression, str) or not expression.strip():
        raise ConfigError("jsonpath must be a non-empty string", source=source)
    try:
        return parse_jsonpath(expression)
    except JSONPathError as e:
        raise ConfigError(f"invalid jsonpath {expression!r}: {e}", source=source) from e


def extract_first(document: Any, path, source: Optional[str] = None) -> Any:
    """
    Evaluate a compiled JSON-path query and return the first match.

    Raises:
        DataNotFound: the query matched nothing
    """
    matches = path.find(document)
    if not matches:
        raise DataNotFound(f"jsonpath {path} matched no elements", source=source)
    return matches[0].value


def to_decimal(value: Any, source: Optional[str] = None) -> Decimal:
    """
    Interpret a JSON element as a non-negative finite decimal.

    Numbers are used directly, strings are parsed as decimal numbers.
    Anything else (bool, null, object, array) is rejected.
    """
    if isinstance(value, bool):
        raise NumericFormatError(f"boolean {value} is not a price", source=source)

    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, int):
        number = Decimal(value)
    elif isinstance(value, float):
        # shortest repr, not the binary expansion
        number = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except InvalidOperation as e:
            raise NumericFormatError(
                f"string {value!r} is not a number", source=source) from e
    else:
        raise NumericFormatError(
            f"{type(value).__name__} is not a number", source=source)

    if not number.is_finite():
        raise NumericFormatError(f"non-finite value {value!r}", source=source)
    if number < 0:
        raise NumericFormatError(f"negative value {value!r}", source=source)
    return number


def scale(value: Decimal, decimal: int, source: Optional[str] = None) -> int:
    """Return floor(value * 10**decimal) as a U256 integer."""
    # bound the magnitude from the exponent before any exact arithmetic
    if value == 0 or value.adjusted() + decimal < 0:
        return 0
    if value.adjusted() + decimal > 77:
        raise NumericFormatError("value does not fit in 256 bits", source=source)
    scaled = math.floor(Fraction(value) * 10 ** decimal)
    return to_u256(scaled, source=source)


def normalize(text: str, path, decimal: int, source: Optional[str] = None) -> int:
    """Run the whole body-to-integer pipeline."""
    document = parse_json(text, source=source)
    element = extract_first(document, path, source=source)
    value = to_decimal(element, source=source)
    result = scale(value, decimal, source=source)
    logger.debug(f"{source}: extracted {element!r}, scaled by 10^{decimal} -> {result}")
    return result
