"""
Symbolic-or-numeric parameters.

A gate parameter is either a concrete ``float`` or a ``sympy.Expr`` that holds
at least one free symbol. Strings are parsed with sympy, so ``"theta"``,
``"2*theta + phi"`` and ``"pi/4"`` are all valid inputs; expressions without
free symbols collapse to floats right away. Only the names in ``MATH_NAMES``
keep a mathematical meaning, so ``"E"``, ``"I"`` or ``"gamma"`` are free
symbols like any other identifier.

Free symbols are resolved against a resolver: any object exposing
``resolve(name) -> float`` that fails for unknown names. ``Calculator`` is the
default resolver; plain mappings are wrapped in one.
"""
from typing import Any, Dict, Mapping, Protocol, Union
import keyword
import numbers
import re

import sympy
from attrs import define, field
from sympy.parsing.sympy_parser import parse_expr
from typing_extensions import TypeIs

from .utilities import SubstitutionError
from ..util.log import get_logger
logger = get_logger(__name__)

SymbolicFloat = Union[float, sympy.Expr]
"""A floating point value or a sympy expression with free symbols."""


class Resolver(Protocol):
    def resolve(self, name: str) -> float: ...


MATH_NAMES: Dict[str, Any] = {
    "pi": sympy.pi,
    "sqrt": sympy.sqrt,
    "exp": sympy.exp,
    "log": sympy.log,
    "sin": sympy.sin,
    "cos": sympy.cos,
    "tan": sympy.tan,
    "asin": sympy.asin,
    "acos": sympy.acos,
    "atan": sympy.atan,
    "atan2": sympy.atan2,
    "sinh": sympy.sinh,
    "cosh": sympy.cosh,
    "tanh": sympy.tanh,
    "Abs": sympy.Abs,
    "abs": sympy.Abs,
    "sign": sympy.sign,
    "floor": sympy.floor,
    "ceiling": sympy.ceiling,
}
"""Names with a fixed mathematical meaning; every other identifier is a free symbol."""

# constructors emitted by the parser's number and factorial transformations
_PARSER_NAMES: Dict[str, Any] = {
    "Integer": sympy.Integer,
    "Float": sympy.Float,
    "Rational": sympy.Rational,
    "Symbol": sympy.Symbol,
    "factorial": sympy.factorial,
    "factorial2": sympy.factorial2,
}

_IDENTIFIER = re.compile(r"(?<![\w.])[A-Za-z_]\w*")
_ATTRIBUTE_ACCESS = re.compile(r"(?:(?<![\w.])[A-Za-z_]\w*|[)\]])\s*\.")


def _parse(text: str) -> sympy.Expr:
    """Parse an arithmetic expression without handing names to sympy's namespace.

    Raises ``ValueError`` for anything that is not a plain expression
    (attribute access, dunder names, string literals).
    """
    if "__" in text or _ATTRIBUTE_ACCESS.search(text) or any(c in text for c in "'\"`;"):
        raise ValueError(f"Parameter {text!r} is not a plain arithmetic expression")

    source = text
    symbols: Dict[str, sympy.Symbol] = {}
    for name in sorted(set(_IDENTIFIER.findall(text))):
        if name in MATH_NAMES or name in _PARSER_NAMES:
            continue
        if keyword.iskeyword(name):
            # 'lambda' and friends cannot reach the tokenizer as they are
            placeholder = f"_{name}_keyword"
            source = re.sub(rf"(?<![\w.]){name}\b", placeholder, source)
            symbols[placeholder] = sympy.Symbol(name)
        else:
            symbols[name] = sympy.Symbol(name)

    namespace = {**MATH_NAMES, **_PARSER_NAMES, "__builtins__": {}}
    try:
        parsed = parse_expr(source, local_dict=symbols, global_dict=namespace)
    except Exception as exc:
        logger.debug(f"Failed to parse parameter {text!r}: {exc!r}")
        raise ValueError(f"Cannot parse parameter {text!r}") from exc
    if not isinstance(parsed, sympy.Expr):
        raise TypeError(f"Parameter {text!r} does not describe a number")
    return parsed


def to_symbolic(value: Any) -> SymbolicFloat:
    """Convert user input into the canonical ``SymbolicFloat`` representation."""
    if isinstance(value, bool):
        raise TypeError(f"Cannot use bool {value!r} as a symbolic parameter")
    if isinstance(value, str):
        value = _parse(value)
    if isinstance(value, sympy.Basic):
        if not isinstance(value, sympy.Expr):
            raise TypeError(f"Cannot use {value!r} as a symbolic parameter")
        if value.free_symbols:
            return value
        evaluated = complex(value.evalf())
        if evaluated.imag != 0.0:
            raise TypeError(f"Symbolic parameter {value} is not real")
        return float(evaluated.real)
    if isinstance(value, numbers.Real):
        return float(value)
    raise TypeError(f"Argument cannot be converted to a symbolic parameter: {value!r}")


def is_symbolic(value: Any) -> TypeIs[sympy.Expr]:
    """True if ``value`` still carries free symbols."""
    return isinstance(value, sympy.Basic) and bool(value.free_symbols)


def serialize_symbolic(value: SymbolicFloat) -> Union[float, str]:
    if is_symbolic(value):
        return str(value)
    return float(value)


@define
class Calculator:
    """Name -> float store used to evaluate symbolic parameters.

    >>> calc = Calculator({"theta": 0.5})
    >>> calc.evaluate("2*theta")
    1.0
    """
    variables: Dict[str, float] = field(factory=dict, converter=dict)

    def set_variable(self, name: str, value: float) -> None:
        self.variables[name] = float(value)

    def resolve(self, name: str) -> float:
        try:
            return self.variables[name]
        except KeyError:
            raise SubstitutionError(name) from None

    def evaluate(self, value: Any) -> float:
        return substitute_symbolic(to_symbolic(value), self)


def as_resolver(resolver: Union[Resolver, Mapping[str, float]]) -> Resolver:
    if isinstance(resolver, Mapping):
        return Calculator(resolver)
    if not callable(getattr(resolver, "resolve", None)):
        raise TypeError(f"{resolver!r} is neither a mapping nor exposes resolve(name)")
    return resolver


def substitute_symbolic(value: SymbolicFloat, resolver: Resolver) -> float:
    """Resolve every free symbol of ``value`` and return the resulting float.

    Raises ``SubstitutionError`` naming the first symbol (in sorted name order)
    the resolver cannot provide, or when the result is not a real number.
    """
    if not is_symbolic(value):
        return float(value)

    values = {}
    for symbol in sorted(value.free_symbols, key=lambda s: s.name):
        try:
            values[symbol] = float(resolver.resolve(symbol.name))
        except SubstitutionError:
            logger.debug(f"Unresolved symbol '{symbol.name}' in {value}")
            raise
        except Exception as exc:
            logger.debug(f"Resolver failed on '{symbol.name}' in {value}: {exc!r}")
            raise SubstitutionError(symbol.name) from exc

    evaluated = complex(value.subs(values).evalf())
    if evaluated.imag != 0.0:
        raise SubstitutionError(
            str(value), message=f"Expression {value} evaluates to non-real {evaluated}"
        )
    return float(evaluated.real)
