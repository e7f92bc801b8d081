"""Best-effort constant evaluation of OpenSCAD expression nodes.

The functions here reduce an expression subtree to a number, a 3-vector or a
boolean. They never raise: when a value cannot be determined they return
None. There is no variable-binding environment, so identifiers, special
variables, member/index accessors and function calls all resolve to 0.

Nodes that a parser recovered from a syntax error may still carry their raw
source text. When structural evaluation fails the evaluator hands that text
to a :class:`~openscad_csg.scraper.FragmentScraper`. Pass ``scraper=None``
to any function to disable this recovery.

Example:
    from openscad_csg.evaluator import extract_value, extract_vector

    extract_value({"type": "expression", "expressionType": "binary_expression",
                   "operator": "*",
                   "left": {"type": "expression", "expressionType": "literal", "value": 2},
                   "right": {"type": "expression", "expressionType": "literal", "value": 3}})
    # 6
    extract_vector([1, 2, 3])  # (1, 2, 3)
    extract_vector(5)          # (5, 5, 5)
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

from .adapter import expression_kind, first_field, get_field, is_ast_node, raw_text
from .scraper import DEFAULT_SCRAPER, FragmentScraper, parse_leading_float
from .tree.nodes import Vector3


logger = logging.getLogger(__name__)

_PLACEHOLDER_KINDS = ("identifier", "special_variable", "accessor", "function_call")


def _finite(value: Any) -> Optional[float]:
    if isinstance(value, complex):
        return None
    try:
        if not math.isfinite(value):
            return None
    except OverflowError:
        # Integers too large to represent as a float.
        return None
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _literal_value(node: Any) -> Optional[float]:
    value = get_field(node, "value")
    if value is None:
        value = raw_text(node)
    if _is_number(value):
        return _finite(value)
    if isinstance(value, str):
        return parse_leading_float(value)
    return None


def _apply_binary(operator: str, left: float, right: float) -> Optional[float]:
    try:
        if operator == "+":
            return _finite(left + right)
        if operator == "-":
            return _finite(left - right)
        if operator == "*":
            return _finite(left * right)
        if operator == "/":
            return _finite(left / right) if right != 0 else None
        if operator == "%":
            return _finite(math.fmod(left, right)) if right != 0 else None
        if operator in ("^", "**"):
            return _finite(float(left) ** float(right))
    except (OverflowError, ZeroDivisionError, ValueError):
        return None
    logger.debug("Unsupported binary operator %r", operator)
    return None


def _evaluate_binary(node: Any, scraper: Optional[FragmentScraper]) -> Optional[float]:
    operator = get_field(node, "operator")
    left = extract_value(get_field(node, "left"), scraper=scraper)
    right = extract_value(get_field(node, "right"), scraper=scraper)
    if left is None or right is None:
        return None
    return _apply_binary(operator, left, right)


def _evaluate_unary(node: Any, scraper: Optional[FragmentScraper]) -> Optional[float]:
    operator = get_field(node, "operator")
    operand = extract_value(first_field(node, "operand", "expression"), scraper=scraper)
    if operand is None:
        return None
    if operator == "-":
        return -operand
    if operator == "+":
        return operand
    if operator == "!":
        return 0 if operand else 1
    logger.debug("Unsupported unary operator %r", operator)
    return None


def extract_value(node: Any, scraper: Optional[FragmentScraper] = DEFAULT_SCRAPER) -> Optional[float]:
    """Reduce an expression to a number.

    Resolution by node kind:

    - literal: numbers verbatim, strings parsed as a leading float;
    - identifier, special variable, accessor, function call: 0;
    - binary: ``+ - * / % ^ **`` over both resolved operands, None when
      either side is unresolved or on division/modulo by zero;
    - unary: ``-`` negates, ``+`` is identity, ``!`` maps truthiness to 0/1;
    - conditional: the then branch only, never the condition or else branch;
    - parenthesized: the inner expression, else the bracket-stripped text;
    - error: the first number in the raw text.

    Raw Python numbers and numeric strings are accepted as already-evaluated
    values.

    Args:
        node: An expression node or raw value.
        scraper: Raw-text recovery strategy, or None to disable it.

    Returns:
        The value, or None if it cannot be determined. Never NaN or infinity.
    """
    if node is None:
        return None
    if _is_number(node):
        return _finite(node)
    if isinstance(node, str):
        return parse_leading_float(node)
    if isinstance(node, (bool, list, tuple)):
        return None

    kind = expression_kind(node)

    if kind == "literal":
        return _literal_value(node)

    if kind in _PLACEHOLDER_KINDS:
        logger.debug("%s %r resolved to placeholder 0", kind, raw_text(node) or first_field(node, "name"))
        return 0

    if kind == "binary_expression":
        return _evaluate_binary(node, scraper)

    if kind == "unary_expression":
        return _evaluate_unary(node, scraper)

    if kind == "conditional_expression":
        then_branch = first_field(node, "thenBranch", "then_branch", "consequence")
        if then_branch is None:
            return 0
        return extract_value(then_branch, scraper=scraper)

    if kind == "parenthesized_expression":
        inner = first_field(node, "expression", "inner")
        if inner is not None:
            return extract_value(inner, scraper=scraper)
        if scraper is not None:
            value = scraper.stripped_number(raw_text(node))
            if value is not None:
                return value
        logger.debug("Parenthesized expression without inner expression")
        return None

    if kind == "error":
        if scraper is None:
            return None
        return scraper.first_number(raw_text(node))

    logger.warning("Unhandled expression kind %r, text %r", kind, raw_text(node))
    return None


def _vector_from_elements(elements, scraper, pad: float) -> Optional[Vector3]:
    if not elements:
        return None
    values = []
    for element in list(elements)[:3]:
        value = extract_value(element, scraper=scraper)
        values.append(0 if value is None else value)
    while len(values) < 3:
        values.append(pad)
    return (values[0], values[1], values[2])


def extract_vector(
    node: Any,
    scraper: Optional[FragmentScraper] = DEFAULT_SCRAPER,
    pad: float = 0,
) -> Optional[Vector3]:
    """Reduce an expression to an (x, y, z) triple.

    A vector expression (or raw list) is evaluated element-wise; elements
    that cannot be resolved become 0, and vectors shorter than three are
    completed with ``pad``. Any expression that resolves to a single number
    is broadcast to all three components, as OpenSCAD does for ``cube(5)``
    or ``scale(2)``. Parenthesized and error nodes fall back to scanning
    their raw text for a ``[x, y, z]`` literal.

    Args:
        node: An expression node or raw value.
        scraper: Raw-text recovery strategy, or None to disable it.
        pad: Value for missing trailing components (1 suits scale factors).

    Returns:
        The vector, or None if it cannot be determined.
    """
    if node is None:
        return None
    if isinstance(node, (list, tuple)):
        return _vector_from_elements(node, scraper, pad)

    kind = expression_kind(node) if is_ast_node(node) else None

    if kind == "vector_expression":
        return _vector_from_elements(first_field(node, "elements", "items"), scraper, pad)

    if kind == "parenthesized_expression":
        inner = first_field(node, "expression", "inner")
        if inner is not None:
            return extract_vector(inner, scraper=scraper, pad=pad)

    if kind in ("parenthesized_expression", "error") and scraper is not None:
        vector = scraper.first_vector(raw_text(node))
        if vector is not None:
            return vector

    value = extract_value(node, scraper=scraper)
    if value is not None:
        return (value, value, value)

    if kind is not None and scraper is not None:
        return scraper.first_vector(raw_text(node))
    return None


def extract_boolean(node: Any, scraper: Optional[FragmentScraper] = DEFAULT_SCRAPER) -> Optional[bool]:
    """Reduce an expression to a boolean.

    Boolean literals are returned as-is, numeric literals are true when
    nonzero, and everything else is evaluated with :func:`extract_value` and
    tested for nonzero. None propagates.
    """
    if node is None:
        return None
    if isinstance(node, bool):
        return node
    if isinstance(node, str) and node.strip() in ("true", "false"):
        return node.strip() == "true"

    if is_ast_node(node) and expression_kind(node) == "literal":
        value = get_field(node, "value")
        if isinstance(value, bool):
            return value
        if value is None and raw_text(node) in ("true", "false"):
            return raw_text(node) == "true"
        if _is_number(value):
            return value != 0

    value = extract_value(node, scraper=scraper)
    if value is None:
        return None
    return value != 0
