r"""
Brigade argument specifications.

Overview
- Argument: immutable description of one positional parameter of a subcommand.
  • name: identifier used both as the backend binding key and in help placeholders.
  • parser: backend parser reference (any callable `token -> value`).
  • required: whether the backend must see a token for it.
  • typename: human-readable type label, shown only in help hover metadata.

- SpecType metaclass
  • Exposes the names declared in __introspectable__ as read-only properties
    (via mirror()) and provides stable __repr__/__rich_repr__ implementations.
  • Shared with brigade.subcommands so every declaration prints the same way.

Display rules
- label: the name lower-cased with underscores shown as spaces
  (e.g., "loop_type" → "loop type").
- placeholder: "<label>" when required, "[label]" when optional.

Validation highlights
- name must be a non-empty string after trimming.
- parser must be callable.
- typename must be a non-empty string when given; defaults to parsers.typename(parser).
"""
import functools
import operator
import re

from .parsers import typename as _typename
from .utils import Unset, coalesce, mirror, rename


class SpecType(type):
    """
    Metaclass for read-only, introspectable specs.

    Responsibilities
    - Mirror each name listed in __introspectable__ to a read-only property
      backed by "_{name}".
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in validation messages.
    - Provide compact __repr__ and __rich_repr__ for diagnostics.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_name(cls, field, value, /):
    """
    Internal: validate a declared name and return it trimmed.

    Raises
    - TypeError: when the value is not a string.
    - ValueError: when the value is empty after trimming or contains whitespace.
    """
    if not isinstance(value, str):
        raise TypeError(f"{cls.__typename__} '{field}' must be a string")
    elif not (value := value.strip()):
        raise ValueError(f"{cls.__typename__} '{field}' cannot be empty")
    elif re.search(r"\s", value):
        raise ValueError(f"{cls.__typename__} '{field}' cannot contain whitespace")
    return value


class Argument(metaclass=SpecType):
    """
    Immutable metadata for one positional parameter of a subcommand.

    The same object drives two consumers: the dispatch backend (name, parser,
    required) and the help renderer (label, placeholder, typename). Order of
    declaration is preserved by the owning subcommand and is both the
    registration order and the display order.
    """

    __introspectable__ = (
        "name",
        "parser",
        "required",
        "typename",
    )
    __slots__ = tuple("_" + name for name in __introspectable__)

    def __init__(self, name, parser, /, required=True, typename=Unset):
        name = _sanitize_name(type(self), "name", name)
        if not callable(parser):
            raise TypeError(f"{type(self).__typename__} 'parser' must be callable")
        if not isinstance(typename, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'typename' must be a string")
        elif isinstance(typename, str) and not (typename := typename.strip()):
            raise ValueError(f"{type(self).__typename__} 'typename' cannot be empty")

        self._name = name
        self._parser = parser
        self._required = bool(required)
        self._typename = coalesce(typename, _typename(parser))

    @property
    def label(self):
        """
        Display form of the name: lower-cased, underscores shown as spaces.
        """
        return self._name.lower().replace("_", " ")

    @property
    def placeholder(self):
        return f"<{self.label}>" if self._required else f"[{self.label}]"

    def __eq__(self, other):
        if not isinstance(other, Argument):
            return NotImplemented
        return (self._name, self._parser, self._required, self._typename) == \
            (other._name, other._parser, other._required, other._typename)

    def __hash__(self):
        return hash((self._name, self._required, self._typename))


__all__ = (
    "Argument",
    "SpecType",
)
