"""
Brigade dispatch boundary: what command modules hand to a backend, and what
executors receive back.

Records
- Literal(name, aliases): one literal segment of a command path.
- Binding(name, parser, required): one argument binding, in declared order.
- Registration(path, permissions, arguments, handler): one registration call.
  • path: tuple[Literal, ...]
  • permissions: every permission the backend must check, outermost first.
  • handler: callable(context) -> None.

Protocols
- Dispatcher: anything with register(registration). Command modules only ever
  call this method; tokenizing, matching, permission checks and argument
  parsing are the backend's job.
- Audience: caller-facing output sink with info(*lines) and warn(*lines).

Invocation side
- Context: what a handler receives (sender, audience, bound arguments).
- ConsoleAudience: rich-backed Audience printing to a Console.

Reference backend
- LocalDispatcher: small in-process backend so a module tree can run without a
  host framework (used by the demo and the tests).

Example
    dispatcher = LocalDispatcher()
    module.build(dispatcher)
    dispatcher.dispatch("bettermodel spawn zombie husk 2.0", sender="console")
"""
import logging
import shlex
from collections.abc import Iterable
from types import MappingProxyType
from typing import NamedTuple, Protocol, Any, runtime_checkable

from rich.console import Console
from rich.text import Text

from .faults import (
    FaultCode,
    MissingArgumentError,
    MissingPermissionError,
    UncastableArgumentError,
    UnknownCommandError,
    UnparsedTokensError,
    trigger,
)
from .utils import Unset, coalesce

logger = logging.getLogger(__name__)


class Literal(NamedTuple):
    name: str
    aliases: tuple[str, ...] = ()

    def matches(self, token, /):
        return token == self.name or token in self.aliases


class Binding(NamedTuple):
    name: str
    parser: Any
    required: bool


class Registration(NamedTuple):
    path: tuple[Literal, ...]
    permissions: tuple[str, ...]
    arguments: tuple[Binding, ...]
    handler: Any

    @property
    def key(self):
        """
        Literal names of the path; identifies the registration in a backend.
        """
        return tuple(literal.name for literal in self.path)


@runtime_checkable
class Dispatcher(Protocol):
    def register(self, registration: Registration, /) -> None: ...


@runtime_checkable
class Audience(Protocol):
    def info(self, *lines: str | Text) -> None: ...
    def warn(self, *lines: str | Text) -> None: ...


class ConsoleAudience:
    """
    Audience printing through a rich Console.

    Parameters
    - console: Console | Unset
      Target console; a fresh stdout Console when Unset.
    - style: str
      Style applied to warning lines.
    """

    def __init__(self, console=Unset, /, style="yellow"):
        self.console = Console() if console is Unset else console
        self.style = style

    def info(self, *lines):
        for line in lines:
            self.console.print(line, highlight=False)

    def warn(self, *lines):
        for line in lines:
            if isinstance(line, Text):
                line = line.copy()
                line.stylize(self.style)
            else:
                line = Text(str(line), self.style)
            self.console.print(line, highlight=False)


class Context:
    """
    Invocation context handed to handlers and executors.

    Access
    - context["name"]                → bound value, KeyError when absent.
    - context.get("name", default)   → bound value or default.
    - "name" in context              → presence check (optional arguments).
    - context.map("name", mapper, default=Unset)
                                     → mapper(value); default when absent,
                                       KeyError when absent without default.
    """

    __slots__ = ("_sender", "_audience", "_values")

    def __init__(self, sender, audience, values=(), /):
        self._sender = sender
        self._audience = audience
        self._values = dict(values)

    @property
    def sender(self):
        return self._sender

    @property
    def audience(self):
        return self._audience

    @property
    def values(self):
        return MappingProxyType(self._values)

    def __getitem__(self, name):
        return self._values[name]

    def __contains__(self, name):
        return name in self._values

    def get(self, name, default=None, /):
        return self._values.get(name, default)

    def map(self, name, mapper, /, default=Unset):
        if name not in self._values:
            if default is Unset:
                raise KeyError(name)
            return default
        return mapper(self._values[name])

    def __repr__(self):
        return f"Context(sender={self._sender!r}, values={self._values!r})"


def _allow(sender, permission, /):
    return True


class LocalDispatcher:
    """
    In-process reference backend.

    Parameters
    - permits: Callable[[sender, str], bool] | Unset
      Permission predicate; every permission of a registration must pass.
      Allows everything when Unset.
    - shell: bool
      When True, faults are printed through rich instead of raised.

    Matching
    - The registration whose literal path matches the longest prefix of the
      tokens wins, so literals always outrank arguments ("bm help" reaches the
      help literal, never the optional page argument).
    - Re-registering an identical literal path replaces the earlier one.
    """

    def __init__(self, permits=Unset, /, *, shell=False):
        if not callable(permits := coalesce(permits, _allow)):
            raise TypeError("local-dispatcher 'permits' must be callable")
        self._permits = permits
        self._shell = bool(shell)
        self._registrations = {}

    @property
    def registrations(self):
        return tuple(self._registrations.values())

    def register(self, registration, /):
        if not isinstance(registration, Registration):
            raise TypeError("register() argument must be a registration")
        if registration.key in self._registrations:
            logger.debug("replacing registration %r", " ".join(registration.key))
        self._registrations[registration.key] = registration

    def _match(self, tokens):
        best, depth = None, -1
        for registration in self._registrations.values():
            path = registration.path
            if len(path) > len(tokens) or len(path) <= depth:
                continue
            if all(literal.matches(token) for literal, token in zip(path, tokens)):
                best, depth = registration, len(path)
        return best

    def _fault(self, fault, tokens, **options):
        trigger(fault, prog=tokens[0] if tokens else "brigade", shell=self._shell, **options)

    def dispatch(self, prompt, /, sender=Unset, audience=Unset):
        """
        Run one invocation.

        Parameters
        - prompt: str | Iterable[str]
          A shell-like string (split via shlex.split) or pre-split tokens.
        - sender: any
          Caller identity, passed to `permits` and exposed on the context.
        - audience: Audience | Unset
          Output sink for the handler; a ConsoleAudience when Unset.

        Returns
        - True when a handler ran, False when a fault was printed in shell mode.
        """
        if isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = []
            for token in prompt:
                if not isinstance(token, str):
                    raise TypeError("dispatch() argument must be a string or an iterable of strings")
                if token := token.strip():
                    tokens.append(token)
        else:
            raise TypeError("dispatch() argument must be a string or an iterable of strings")
        if tokens and tokens[0].startswith("/"):
            tokens[0] = tokens[0][1:]

        if (registration := self._match(tokens)) is None:
            self._fault(UnknownCommandError(
                f"no command matches {' '.join(tokens)!r}" if tokens else "no command given",
                code=FaultCode.UNKNOWN_COMMAND,
                title="unknown command",
                hint="check the spelling, or run '<command> help' to list what is available",
            ), tokens)
            return False

        route = " ".join(registration.key)
        for permission in registration.permissions:
            if not self._permits(coalesce(sender), permission):
                self._fault(MissingPermissionError(
                    f"permission {permission!r} is required to run {route!r}",
                    code=FaultCode.MISSING_PERMISSION,
                    title="missing permission",
                    hint="ask an operator to grant the permission",
                ), tokens)
                return False

        remaining = tokens[len(registration.path):]
        values = {}
        for binding in registration.arguments:
            if not remaining:
                if binding.required:
                    self._fault(MissingArgumentError(
                        f"argument {binding.name!r} is required by {route!r}",
                        code=FaultCode.MISSING_ARGUMENT,
                        title="missing argument",
                        hint=f"run '{registration.key[0]} help' to see the expected arguments",
                    ), tokens)
                    return False
                break
            token = remaining.pop(0)
            try:
                values[binding.name] = binding.parser(token)
            except (ValueError, TypeError) as exception:
                self._fault(UncastableArgumentError(
                    f"argument {binding.name!r} cannot use {token!r}: {exception}",
                    code=FaultCode.UNCASTABLE_ARGUMENT,
                    title="invalid argument",
                    hint=f"provide a valid {binding.name!r}",
                ), tokens)
                return False

        if remaining:
            self._fault(UnparsedTokensError(
                f"unexpected input {' '.join(remaining)!r} after {route!r}",
                code=FaultCode.UNPARSED_TOKENS,
                title="unparsed input",
                hint="remove the extra inputs",
            ), tokens)
            return False

        logger.debug("dispatching %r with %r", route, values)
        registration.handler(Context(
            coalesce(sender), ConsoleAudience() if audience is Unset else audience, values
        ))
        return True


__all__ = (
    "Literal",
    "Binding",
    "Registration",
    "Dispatcher",
    "Audience",
    "ConsoleAudience",
    "Context",
    "LocalDispatcher",
)
