"""Compile function-graph expressions into scalar callables.

The kernel only needs ``f(x) -> float | None``.  Expressions are parsed with
sympy (``^`` means power, implicit multiplication such as ``2x`` or
``3 sin(x)`` is accepted) and lambdified against the ``math`` module.  An
optional ``y =`` or ``f(x) =`` prefix is ignored.
"""

from __future__ import annotations

import io
import keyword
import logging
import math
import re
import tokenize
from functools import lru_cache
from typing import Callable, Optional

import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    parse_expr,
    standard_transformations,
)

from .errors import ExpressionError

logger = logging.getLogger(__name__)

ScalarFunction = Callable[[float], Optional[float]]

_X = sp.Symbol("x", real=True)
_TRANSFORMATIONS = standard_transformations + (implicit_multiplication_application, convert_xor)
_PREFIX_RE = re.compile(r"^\s*(?:y|f\s*\(\s*x\s*\))\s*=\s*")
_ALLOWED_OPS = frozenset({"+", "-", "*", "/", "**", "^", "%", "(", ")", ",", "!"})


def _strip_prefix(text: str) -> str:
    return _PREFIX_RE.sub("", text, count=1).strip()


def _check_tokens(expression: str, body: str) -> None:
    # parse_expr evaluates the transformed text, so attribute access, dunder
    # names, subscripts and keywords never reach it
    for tok in tokenize.generate_tokens(io.StringIO(body).readline):
        if tok.type == tokenize.OP and tok.string not in _ALLOWED_OPS:
            raise ExpressionError(expression, f"unsupported operator {tok.string!r}")
        if tok.type == tokenize.NAME and (tok.string.startswith("_") or keyword.iskeyword(tok.string)):
            raise ExpressionError(expression, f"unsupported name {tok.string!r}")


@lru_cache(maxsize=256)
def compile_expression(expression: str) -> ScalarFunction:
    """Return a callable evaluating ``expression`` at a given ``x``.

    The callable returns ``None`` where the expression is undefined, complex
    or not finite.  :class:`ExpressionError` is raised when the text cannot be
    parsed or uses a variable other than ``x``.

    Only arithmetic operators, numbers, names and calls are accepted before
    the text is handed to sympy's ``parse_expr``, which evaluates it.  Even so,
    expressions should come from trusted input such as the user's own scene.
    """

    body = _strip_prefix(expression)
    if not body:
        raise ExpressionError(expression, "empty expression")
    try:
        _check_tokens(expression, body)
        parsed = parse_expr(body, local_dict={"x": _X, "e": sp.E, "pi": sp.pi}, transformations=_TRANSFORMATIONS)
    except ExpressionError:
        raise
    except (SyntaxError, TypeError, ValueError, AttributeError, tokenize.TokenError, sp.SympifyError) as exc:
        raise ExpressionError(expression, str(exc)) from exc
    if not isinstance(parsed, sp.Expr):
        raise ExpressionError(expression, f"not a scalar expression ({type(parsed).__name__})")

    unknown = sorted(str(sym) for sym in parsed.free_symbols if sym != _X)
    if unknown:
        raise ExpressionError(expression, f"unknown variable(s): {', '.join(unknown)}")

    raw = sp.lambdify(_X, parsed, modules=["math"])
    logger.debug("compiled expression %r -> %s", expression, parsed)

    def evaluate(x: float) -> Optional[float]:
        try:
            value = raw(float(x))
        except (ArithmeticError, ValueError, TypeError):
            return None
        if isinstance(value, complex):
            return None
        try:
            value = float(value)
        except (TypeError, ValueError):
            return None
        return value if math.isfinite(value) else None

    return evaluate


__all__ = ["ScalarFunction", "compile_expression"]
