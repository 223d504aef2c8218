"""
Brigade subcommands: mutable builder → immutable snapshot.

What this module provides
- SubcommandBuilder: accumulator handed to the configure callable of
  CommandModule.command(...). It records aliases, a short description, the
  ordered argument list and the executor.
- Subcommand: frozen value produced by SubcommandBuilder.build(root). It owns a
  defensive copy of every accumulated collection, so later builder calls never
  leak into an already-built subcommand.

Conventions
- Argument append order is preserved; it is both the backend registration order
  and the help display order. Required-before-optional ordering is the caller's
  responsibility and is not validated.
- A builder without executor yields a no-op executor, never None.
- build() may be called repeatedly; each call is an independent snapshot.
"""
import logging

from .arguments import Argument, SpecType, _sanitize_name
from .utils import Unset, rename

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = "No description"


@rename("noop")
def _noop(context, /):
    pass


class Subcommand(metaclass=SpecType):
    """
    Immutable description of one leaf command.

    Fields
    - name, aliases, permission, descr: identity and help text.
    - arguments: tuple[Argument, ...] in declared order.
    - executor: callable(context) -> None.
    - root: fully-qualified name of the owning module (e.g. "a b c"); used for
      the help line prefix and for the suggested command text.
    """

    __introspectable__ = (
        "name",
        "aliases",
        "permission",
        "descr",
        "arguments",
        "executor",
        "root",
    )
    __slots__ = tuple("_" + name for name in __introspectable__)

    def __init__(self, name, aliases, permission, descr, arguments, executor, root):
        self._name = name
        self._aliases = tuple(aliases)
        self._permission = permission
        self._descr = descr
        self._arguments = tuple(arguments)
        self._executor = executor
        self._root = root

    @property
    def suggestion(self):
        """
        Command text offered when a help entry is clicked.
        """
        return f"/{self._root} {self._name}"


class SubcommandBuilder:
    """
    Mutable accumulator for a Subcommand.

    Parameters
    - name: str
      Literal name of the subcommand.
    - permission: str
      Fully-qualified permission, already composed by the owning module
      ("<module permission>.<name>").
    """

    __typename__ = "subcommand"

    def __init__(self, name, permission, /):
        self._name = _sanitize_name(self, "name", name)
        self._permission = permission
        self._aliases = []
        self._descr = DEFAULT_DESCRIPTION
        self._arguments = []
        self._executor = Unset

    @property
    def name(self):
        return self._name

    @property
    def permission(self):
        return self._permission

    def with_aliases(self, *names):
        self._aliases.extend(_sanitize_name(self, "aliases", name) for name in names)
        return self

    def with_short_description(self, description, /):
        if not isinstance(description, str):
            raise TypeError(f"{self.__typename__} 'descr' must be a string")
        self._descr = description
        return self

    def _append(self, name, parser, required, typename):
        argument = Argument(name, parser, required=required, typename=typename)
        if any(existing.name == argument.name for existing in self._arguments):
            raise ValueError(f"{self.__typename__} argument name {argument.name!r} is already in use")
        self._arguments.append(argument)
        return self

    def with_required_argument(self, name, parser, /, typename=Unset):
        return self._append(name, parser, True, typename)

    def with_optional_argument(self, name, parser, /, typename=Unset):
        return self._append(name, parser, False, typename)

    def executes(self, executor, /):
        if not callable(executor):
            raise TypeError(f"{self.__typename__} 'executor' must be callable")
        self._executor = executor
        return self

    def build(self, root, /):
        """
        Freeze the accumulated state into a Subcommand.

        Parameters
        - root: str
          Fully-qualified name of the owning module, kept on the snapshot for
          help rendering and the click-to-suggest text.
        """
        if self._executor is Unset:
            logger.debug("subcommand %r of %r has no executor, using a no-op", self._name, root)
        return Subcommand(
            self._name,
            list(self._aliases),
            self._permission,
            self._descr,
            list(self._arguments),
            _noop if self._executor is Unset else self._executor,
            root,
        )


__all__ = (
    "Subcommand",
    "SubcommandBuilder",
    "DEFAULT_DESCRIPTION",
)
