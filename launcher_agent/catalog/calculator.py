"""Arithmetic and unit-conversion evaluation for the calculator overlay."""

import numbers
import re
from typing import Optional

import pint

from ..utils.log import get_logger
from .models import Item

logger = get_logger("launcher")

_CONVERSION = re.compile(r"^(?P<source>.+?)\s+(?:to|in|as)\s+(?P<target>[^\d\s][^\s]*)$", re.IGNORECASE)
_HAS_DIGIT = re.compile(r"\d")
# Bare integer literals, not digits inside decimals, exponents or unit names
_INT_LITERAL = re.compile(r"(?<![\w.])(?<![eE][+-])(\d+)(?![\w.])")


def as_float_literals(expression: str) -> str:
    """Rewrite integer literals as floats so powers overflow instead of growing without bound."""
    return _INT_LITERAL.sub(r"\1.0", expression)


def format_number(value: float) -> str:
    """Render integral values without a fraction and cap long decimals at 6 places."""
    if isinstance(value, numbers.Integral):
        return str(value)
    value = float(value)
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    text = repr(value)
    if len(text) > 10:
        text = f"{value:.6f}"
    return text


class Calculator:
    """Evaluates queries such as ``2+2``, ``2^10`` or ``5 km to mi``.

    The unit registry is expensive to build, so one calculator is created
    per process and shared by every catalog that wants the overlay.
    """

    def __init__(self, registry: Optional[pint.UnitRegistry] = None):
        self._registry = registry

    @property
    def registry(self) -> pint.UnitRegistry:
        if self._registry is None:
            self._registry = pint.UnitRegistry()
        return self._registry

    def evaluate(self, expression: str) -> Optional[str]:
        """
        Evaluate an expression.

        Args:
            expression: Raw query text

        Returns:
            Formatted result, or None if the text is not a calculation or
            the result merely echoes the input (e.g. ``42``)
        """
        expr = expression.strip()
        if not expr or not _HAS_DIGIT.search(expr):
            return None

        source, target = expr, None
        conversion = _CONVERSION.match(expr)
        if conversion:
            source, target = conversion.group("source"), conversion.group("target")

        try:
            result = self.registry.parse_expression(as_float_literals(source))
            if target is not None:
                result = self.registry.Quantity(result).to(target)
            formatted = self._format(result)
        except Exception as e:
            # pint raises a wide mix of parse, dimensionality and arithmetic errors
            logger.debug(f"Calculator: {expr!r} is not an expression ({type(e).__name__})")
            return None

        if formatted is None or formatted == expr:
            return None
        logger.debug(f"Calculator: {expr!r} -> {formatted!r}")
        return formatted

    def result_item(self, expression: str) -> Optional[Item]:
        """Synthetic CalculatorResult item for a query, if it evaluates."""
        result = self.evaluate(expression)
        if result is None:
            return None
        return Item.calculator_result(expression.strip(), result)

    def _format(self, result) -> Optional[str]:
        if isinstance(result, numbers.Number):
            return format_number(result)

        quantity = self.registry.Quantity(result)
        magnitude = quantity.magnitude
        if not isinstance(magnitude, numbers.Number):
            return None
        if quantity.dimensionless:
            return format_number(quantity.to("dimensionless").magnitude)
        return f"{format_number(magnitude)} {quantity.units:~}"
