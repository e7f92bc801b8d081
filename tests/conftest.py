"""Pytest configuration and shared fixtures for CSG conversion tests."""

import pytest

from openscad_csg.config import CSGProcessorConfig


@pytest.fixture
def config():
    """Create a default processor configuration."""
    return CSGProcessorConfig()


@pytest.fixture
def config_no_recovery():
    """Create a configuration with raw-text recovery turned off."""
    return CSGProcessorConfig(enable_text_recovery=False)


# --- AST builders. Nodes mirror the normalized shape of the upstream parser. ---

def expr(kind, **fields):
    """Build an expression node of the given expressionType."""
    return {"type": "expression", "expressionType": kind, **fields}


def lit(value):
    return expr("literal", value=value)


def ident(name):
    return expr("identifier", name=name)


def binary(operator, left, right):
    return expr("binary_expression", operator=operator, left=_wrap(left), right=_wrap(right))


def unary(operator, operand):
    return expr("unary_expression", operator=operator, operand=_wrap(operand))


def vec(*items):
    return expr("vector_expression", elements=[_wrap(item) for item in items])


def loc(line=1, column=1):
    return {
        "start": {"line": line, "column": column, "offset": 0},
        "end": {"line": line, "column": column + 1, "offset": 1},
    }


def _wrap(value):
    if isinstance(value, (int, float, str)) and not isinstance(value, bool):
        return lit(value)
    return value


def cube(size=None, center=None, **fields):
    node = {"type": "cube", **fields}
    if size is not None:
        node["size"] = vec(*size) if isinstance(size, (list, tuple)) else _wrap(size)
    if center is not None:
        node["center"] = lit(center)
    return node


def sphere(r=None, **fields):
    node = {"type": "sphere", **fields}
    if r is not None:
        node["radius"] = _wrap(r)
    return node


def cylinder(**fields):
    return {"type": "cylinder", **{k: _wrap(v) for k, v in fields.items()}}


def operation(kind, *children, **fields):
    return {"type": kind, "children": list(children), **fields}


def union(*children, **fields):
    return operation("union", *children, **fields)


def transform(kind, vector, *children, **fields):
    node = {"type": kind, "children": list(children), **fields}
    if vector is not None:
        node["vector"] = vec(*vector) if isinstance(vector, (list, tuple)) else _wrap(vector)
    return node


def translate(vector, *children, **fields):
    return transform("translate", vector, *children, **fields)


def strip_ids(data):
    """Remove ids and timings from serialized CSG data for comparison."""
    if isinstance(data, dict):
        return {
            key: strip_ids(value)
            for key, value in data.items()
            if key not in ("id", "processingTime")
        }
    if isinstance(data, list):
        return [strip_ids(item) for item in data]
    return data
