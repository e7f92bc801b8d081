"""Best-effort recovery of literals from raw source fragments.

Parsers that recover from syntax errors often keep the original source slice
of a broken subtree even when structural parsing failed. The scraper pulls a
number or a 3-vector back out of that text so one syntax hiccup need not
discard an otherwise valid scene.

The scraper is deliberately isolated from the evaluation cascade in
:mod:`openscad_csg.evaluator`: every evaluator function takes a ``scraper``
argument, and passing ``None`` turns raw-text recovery off.

Example:
    from openscad_csg.scraper import FragmentScraper

    scraper = FragmentScraper()
    scraper.first_number("cube(size=12.5")     # 12.5
    scraper.first_vector("translate([1, 2, 3]")  # (1.0, 2.0, 3.0)
"""

from __future__ import annotations

import logging
import math
import re
from typing import Optional

from arpeggio import NoMatch, NonTerminal

from .grammar import getNumberScanner, getVectorScanner


logger = logging.getLogger(__name__)

Vector3 = tuple[float, float, float]

# Leading decimal literal, the same prefix JavaScript's parseFloat() accepts.
_LEADING_FLOAT = re.compile(r'\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)')
_BRACKETS = re.compile(r'[()\[\]]')


def parse_leading_float(text: str) -> Optional[float]:
    """Parse the leading decimal number of a string.

    Trailing garbage is ignored, so ``"5mm"`` parses as ``5.0``. Returns None
    when the string does not start with a number or the number is not finite.
    """
    match = _LEADING_FLOAT.match(text)
    if match is None:
        return None
    value = float(match.group(1))
    if not math.isfinite(value):
        return None
    return value


def _find_first(node, rule_name: str):
    """Depth-first search of an Arpeggio parse tree for a rule."""
    if node.rule_name == rule_name:
        return node
    if isinstance(node, NonTerminal):
        for child in node:
            found = _find_first(child, rule_name)
            if found is not None:
                return found
    return None


def _to_float(text: str) -> Optional[float]:
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


class FragmentScraper:
    """Scans raw source text for the first usable number or 3-vector.

    A fresh Arpeggio parser is created for every scan, so a single scraper
    can be shared by conversions running concurrently.
    """

    def first_number(self, text: str | None) -> Optional[float]:
        """Return the first unsigned decimal token (``\\d+(\\.\\d+)?``) in text."""
        if not text or not text.strip():
            return None
        try:
            tree = getNumberScanner().parse(text)
        except NoMatch:  # pragma: no cover
            return None
        token = _find_first(tree, 'TOK_NUMBER')
        if token is None:
            return None
        value = _to_float(token.value)
        if value is not None:
            logger.debug("Recovered number %s from fragment %r", value, text)
        return value

    def first_vector(self, text: str | None) -> Optional[Vector3]:
        """Return the first ``[n, n, n]`` literal in text as a float triple."""
        if not text or '[' not in text:
            return None
        try:
            tree = getVectorScanner().parse(text)
        except NoMatch:  # pragma: no cover
            return None
        vector = _find_first(tree, 'vector_literal')
        if vector is None:
            return None
        components = [
            parse_leading_float(child.value)
            for child in vector
            if child.rule_name == 'TOK_COMPONENT'
        ]
        if len(components) != 3 or any(c is None for c in components):
            return None
        logger.debug("Recovered vector %s from fragment %r", components, text)
        return (components[0], components[1], components[2])

    def stripped_number(self, text: str | None) -> Optional[float]:
        """Strip brackets and parentheses from text and parse what is left."""
        if not text:
            return None
        value = parse_leading_float(_BRACKETS.sub('', text).strip())
        if value is not None:
            logger.debug("Recovered number %s from bracketed text %r", value, text)
        return value


#: Shared scraper used by the evaluator unless another one is supplied.
DEFAULT_SCRAPER = FragmentScraper()
