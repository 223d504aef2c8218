"""
Brigade faults (dispatch errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for user-facing dispatch
  failures. Codes are grouped by domain to keep logs/searches predictable.
- CommandException: base type that carries message + options and knows how to
  render itself through rich in a short, lowercased, actionable way.
- trigger(): central entry point to surface a fault (raise, or print in shell mode).

Boundaries
- Only the reference backend (brigade.dispatch.LocalDispatcher) produces these
  faults. The command modules themselves never raise them: duplicate subcommands
  overwrite, missing executors become no-ops, and page numbers are clamped.
- Exceptions raised by executors are not wrapped; they propagate as-is.

Customization
- A host may define __styles__ (palette overrides) and __codes__ (code labels)
  in __main__, the same hooks the help renderer reads.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used by the reference backend (stable identifiers).

    grouping
    - routing (211xx): UNKNOWN_COMMAND
    - access (212xx): MISSING_PERMISSION
    - arguments (213xx): MISSING_ARGUMENT, UNCASTABLE_ARGUMENT, UNPARSED_TOKENS
    """
    # --- routing errors ---
    UNKNOWN_COMMAND     = 21101

    # --- access errors ---
    MISSING_PERMISSION  = 21201

    # --- argument errors ---
    MISSING_ARGUMENT    = 21301
    UNCASTABLE_ARGUMENT = 21302
    UNPARSED_TOKENS     = 21303

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(sys.modules["__main__"], "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base dispatch fault.

    options (all optional)
    - code: FaultCode shown in the header.
    - title: short headline.
    - hint: one actionable sentence.
    - prog: program label for the header (defaults to the first token).
    - shell: print instead of raising when triggered.
    - colorful: style the rendering (default True).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message if message is not Unset else "")
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",

            # body
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(sys.modules["__main__"], "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        header = Text.assemble(
            "[ ",
            text(self.options.get("prog", "brigade"), "prog-name"),
            " — ",
            text(self.options["code"].normalize() if "code" in self.options else "", "code"),
            " | ",
            text(self.options.get("title", type(self).__name__).title(), "error-title"),
            " ]"
        )
        renders = [header, text(self.message, "error-message")]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
        return Group(*renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownCommandError(CommandException): ...
class MissingPermissionError(CommandException): ...
class MissingArgumentError(CommandException): ...
class UncastableArgumentError(CommandException): ...
class UnparsedTokensError(CommandException): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode the fault is printed through rich; otherwise it is raised.
    """
    if (
        not callable(getattr(fault, "__trigger__", None)) or
        not callable(getattr(fault, "__replace__", None))
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "CommandException",
    "UnknownCommandError",
    "MissingPermissionError",
    "MissingArgumentError",
    "UncastableArgumentError",
    "UnparsedTokensError",
    "FaultCode",
    "trigger",
)
