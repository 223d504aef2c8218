"""
Brigade argument parsers (backend parser references).

Scope
- Small converters used as the `parser` of an argument binding. Each parser is a
  callable `token -> value` that raises ValueError on malformed input.
- str(parser) is the human-readable type label shown in help when an argument
  does not declare one explicitly.

Provided factories
- string()                       → str, unchanged token.
- integer(min=Unset, max=Unset)  → int within the inclusive bounds.
- double(min=Unset, max=Unset)   → float within the inclusive bounds.
- boolean()                      → bool from true/false/yes/no/on/off/1/0.

Any other callable may be used as a parser as well (e.g. `int`); its type label
defaults to its __name__ (see typename()).
"""
import math

from .utils import Unset, coalesce


class Parser:
    """
    Base parser: a named converter with optional inclusive bounds.

    Subclasses implement _convert(token) and declare __typename__.
    """

    __typename__ = "parser"
    __slots__ = ("_min", "_max")

    def __init__(self, min=Unset, max=Unset):
        if min is not Unset and max is not Unset and min > max:
            raise ValueError(f"{self.__typename__} 'min' cannot be greater than 'max'")
        self._min = min
        self._max = max

    @property
    def min(self):
        return coalesce(self._min)

    @property
    def max(self):
        return coalesce(self._max)

    def _convert(self, token):
        raise NotImplementedError

    def __call__(self, token, /):
        if not isinstance(token, str):
            raise TypeError(f"{self.__typename__} parser expects a string token")
        value = self._convert(token)
        if self._min is not Unset and value < self._min:
            raise ValueError(f"{token!r} is lower than the minimum of {self._min}")
        if self._max is not Unset and value > self._max:
            raise ValueError(f"{token!r} is greater than the maximum of {self._max}")
        return value

    def __str__(self):
        return self.__typename__

    def __repr__(self):
        bounds = [f"{name}={value!r}" for name, value in (("min", self._min), ("max", self._max)) if value is not Unset]
        return f"{self.__typename__}({', '.join(bounds)})"

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return (self._min, self._max) == (other._min, other._max)

    def __hash__(self):
        return hash((type(self), self._min, self._max))


class StringParser(Parser):
    __typename__ = "string"
    __slots__ = ()

    def __init__(self):
        super().__init__()

    def _convert(self, token):
        return token


class IntegerParser(Parser):
    __typename__ = "integer"
    __slots__ = ()

    def _convert(self, token):
        try:
            return int(token.strip())
        except ValueError:
            raise ValueError(f"{token!r} is not an integer") from None


class DoubleParser(Parser):
    __typename__ = "double"
    __slots__ = ()

    def _convert(self, token):
        try:
            value = float(token.strip())
        except ValueError:
            raise ValueError(f"{token!r} is not a number") from None
        if not math.isfinite(value):
            raise ValueError(f"{token!r} is not a finite number")
        return value


class BooleanParser(Parser):
    __typename__ = "boolean"
    __slots__ = ()

    _truthy = frozenset({"true", "yes", "on", "1"})
    _falsy = frozenset({"false", "no", "off", "0"})

    def __init__(self):
        super().__init__()

    def _convert(self, token):
        match token.strip().lower():
            case value if value in self._truthy:
                return True
            case value if value in self._falsy:
                return False
            case _:
                raise ValueError(f"{token!r} is not a boolean")


def string():
    return StringParser()


def integer(min=Unset, max=Unset):
    return IntegerParser(min, max)


def double(min=Unset, max=Unset):
    return DoubleParser(min, max)


def boolean():
    return BooleanParser()


def typename(parser, /):
    """
    Default type label for a parser.

    Parser instances label themselves via str(); plain callables fall back to
    their __name__, and anything else to its repr().
    """
    if isinstance(parser, Parser):
        return str(parser)
    return getattr(parser, "__name__", None) or repr(parser)


__all__ = (
    "Parser",
    "StringParser",
    "IntegerParser",
    "DoubleParser",
    "BooleanParser",
    "string",
    "integer",
    "double",
    "boolean",
    "typename",
)
