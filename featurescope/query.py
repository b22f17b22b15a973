"""
Query-string construction for variation lookups.
"""

import math
from decimal import Decimal
from typing import Dict, Mapping, Optional, Sequence, Union

Demographics = Mapping[str, Union[int, float, str]]


def format_float(value: float) -> str:
    """
    Render a float like JavaScript's ``String(number)``.

    Python's ``repr`` already yields the shortest round-tripping digits;
    only the placement of the decimal point and the exponent differ.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    if value < 0:
        return "-" + format_float(-value)

    _, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    digits = "".join(str(d) for d in digit_tuple).rstrip("0")
    k = len(digits)
    # value == 0.<digits> * 10**n
    n = exponent + len(digit_tuple)

    if k <= n <= 21:
        return digits + "0" * (n - k)
    if 0 < n <= 21:
        return f"{digits[:n]}.{digits[n:]}"
    if -6 < n <= 0:
        return "0." + "0" * -n + digits

    e = n - 1
    sign = "+" if e >= 0 else "-"
    mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
    return f"{mantissa}e{sign}{abs(e)}"


def format_demographic_value(value: Union[int, float, str]) -> str:
    """
    Render a demographic value the way the service expects it.

    Booleans become ``true``/``false`` and floats follow JavaScript number
    formatting, so ``30.0`` and ``30`` select the same variation and
    ``1e21`` is sent as ``1e+21``.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_float(value)
    return str(value)


def build_variation_params(
    scope: str,
    demographics: Optional[Demographics] = None,
    feature_ids: Optional[Sequence[str]] = None,
) -> Dict[str, str]:
    """
    Build the query parameters for ``/api/v1/variations``.

    Args:
        scope: Configured scope
        demographics: Attributes describing the subject
        feature_ids: Restrict the lookup to these features

    Returns:
        Parameters as strings, ready for URL encoding
    """
    params = {"scope": scope}
    for key, value in (demographics or {}).items():
        params[str(key)] = format_demographic_value(value)

    # a bare string is a sequence too, so only lists and tuples count
    if isinstance(feature_ids, (list, tuple)):
        params["featureIds"] = ",".join(feature_ids)

    return params
