import sympy as sp
from typing import TypeAlias, cast

Num: TypeAlias = int | float | sp.Expr

# Use SymPy constructors and cast the result to keep mypy happy with SymPy stubs.
DEG_TO_RAD: sp.Expr = cast(sp.Expr, sp.Mul(sp.pi, sp.Rational(1, 180)))
