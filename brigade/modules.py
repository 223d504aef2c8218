"""
Brigade command modules: declare a command tree once, register it and render
its help from the same declarations.

What this module provides
- CommandModule: a named node of the command tree.
  • Owns an insertion-ordered mapping of subcommands (name → Subcommand).
  • Computes its fully-qualified name ("a b c") and permission ("a.b.c") once,
    from the parent's already-computed strings.
  • Optionally carries a top-level executor, aliases and a short description.
  • build(dispatcher) hands every registration to a dispatch backend.
- command_module(name, configure): top-level factory (no parent).

Declaring
    module = command_module("bettermodel", version="1.0.0")
    module.with_aliases("bm")

    @module.command("spawn")
    def _(sub):
        sub.with_aliases("s")
        sub.with_short_description("summons some model to given type")
        sub.with_required_argument("model", string())
        sub.with_optional_argument("scale", double(0.0))
        sub.executes(spawn)

    module.build(dispatcher)

Registrations made by build() (each one a separate register() call)
1. <path> help|h [page]          → send help page (default 1, clamped).
2. <path> <name>|<aliases> args  → one per subcommand, its executor as handler,
                                   gated by the subcommand permission alone.
3. <path> [page]                 → with a top-level executor: "page" present
                                   sends help, absent runs the executor;
                                   without one: always sends help.
The page argument is an integer bounded to [1, maxpage] at build time.

Semantics worth knowing
- command(name, ...) overwrites an earlier subcommand of the same name.
- Children are not registered by their parent; build each module on its own.
- Help pages are rendered on first use and cached for the module's lifetime.
- Declaring anything after build() is a programming error (RuntimeError).
"""
import logging

from .arguments import _sanitize_name
from .dispatch import Binding, Literal, Registration
from .pages import HelpPages, clamp, maxpage, paginate
from .parsers import integer
from .subcommands import DEFAULT_DESCRIPTION, SubcommandBuilder
from .utils import Unset, coalesce, mirror, rename

logger = logging.getLogger(__name__)


def _sanitize_links(cls, links):
    """
    Internal: validate help links as a tuple of (label, url) string pairs.
    """
    sanitized = []
    for link in links:
        try:
            label, url = link
        except (TypeError, ValueError):
            raise TypeError(f"{cls.__typename__} 'links' must contain (label, url) pairs") from None
        if not isinstance(label, str) or not isinstance(url, str):
            raise TypeError(f"{cls.__typename__} 'links' labels and urls must be strings")
        sanitized.append((label, url))
    return tuple(sanitized)


class CommandModule:
    """
    Named, possibly nested node of the command tree.

    Parameters
    - parent: CommandModule | None
      Enclosing module. Only its already-computed name, permission and help
      framing are read, once, at construction.
    - name: str
      Local literal name of this module.
    - title, version: str | Unset
      Help banner text. Inherited from the parent when Unset; the top-most
      module defaults its title to its own name and has no version.
    - links: Iterable[tuple[str, str]] | Unset
      (label, url) pairs shown on the first help page. Inherited when Unset.

    Read-only attributes
    - name, root, permission, path, aliases, descr, subcommands, executor,
      title, version, links
    """

    __typename__ = "command-module"

    name = mirror("name")
    root = mirror("root")
    permission = mirror("permission")
    path = mirror("path")
    aliases = mirror("aliases")
    descr = mirror("descr")
    subcommands = mirror("subcommands")
    executor = mirror("executor")
    title = mirror("title")
    version = mirror("version")
    links = mirror("links")

    def __init__(self, parent, name, /, *, title=Unset, version=Unset, links=Unset):
        if not isinstance(parent, CommandModule | None):
            raise TypeError(f"{self.__typename__} 'parent' must be a command module")
        name = _sanitize_name(self, "name", name)
        if not isinstance(title, str | Unset):
            raise TypeError(f"{self.__typename__} 'title' must be a string")
        if not isinstance(version, str | Unset):
            raise TypeError(f"{self.__typename__} 'version' must be a string")

        self._name = name
        if parent is None:
            self._root = name
            self._permission = name
            self._path = (name,)
            self._title = coalesce(title, name)
            self._version = coalesce(version)
            self._links = () if links is Unset else _sanitize_links(self, links)
        else:
            self._root = f"{parent.root} {name}"
            self._permission = f"{parent.permission}.{name}"
            self._path = parent.path + (name,)
            self._title = coalesce(title, parent.title)
            self._version = coalesce(version, parent.version)
            self._links = parent.links if links is Unset else _sanitize_links(self, links)

        self._aliases = []
        self._descr = DEFAULT_DESCRIPTION
        self._subcommands = {}
        self._executor = None
        self._built = False
        self._help = HelpPages(self._render)
        logger.debug("declared command module %r (permission %r)", self._root, self._permission)

    # ── Declaration ───────────────────────────────────────────────────────────

    def _mutable(self):
        if self._built:
            raise RuntimeError(f"{self.__typename__} {self._root!r} cannot be changed after build()")

    def command(self, name, configure=Unset, /):
        """
        Declare (or replace) a subcommand.

        Forms
        - Direct: module.command("reload", configure) -> Subcommand
        - Decorator:
            @module.command("reload")
            def _(sub): ...
          binds the decorated name to the built Subcommand.

        The configure callable receives a SubcommandBuilder seeded with the
        permission "<module permission>.<name>". An existing subcommand with the
        same name is overwritten.
        """
        self._mutable()

        @rename("command")
        def wrapper(configure, /):
            self._mutable()
            if not callable(configure):
                raise TypeError(f"{self.__typename__} 'configure' must be callable")
            builder = SubcommandBuilder(name, f"{self._permission}.{_sanitize_name(self, 'name', name)}")
            configure(builder)
            subcommand = builder.build(self._root)
            if subcommand.name in self._subcommands:
                logger.debug("subcommand %r of %r overwritten", subcommand.name, self._root)
            self._subcommands[subcommand.name] = subcommand
            return subcommand

        return wrapper(configure) if configure is not Unset else wrapper

    def command_module(self, name, configure=Unset, /, **options):
        """
        Create a nested module under this one.

        The child is returned configured but is not
        registered by this module; build it separately.
        """
        return command_module(name, configure, parent=self, **options)

    def with_aliases(self, *names):
        self._mutable()
        self._aliases.extend(_sanitize_name(self, "aliases", name) for name in names)
        return self

    def with_short_description(self, description, /):
        self._mutable()
        if not isinstance(description, str):
            raise TypeError(f"{self.__typename__} 'descr' must be a string")
        self._descr = description
        return self

    def executes(self, executor, /):
        self._mutable()
        if not callable(executor):
            raise TypeError(f"{self.__typename__} 'executor' must be callable")
        self._executor = executor
        return self

    # ── Help ─────────────────────────────────────────────────────────────────

    @property
    def maxpage(self):
        """
        Page count for the current subcommand set (count // 6 + 1).
        """
        return maxpage(len(self._subcommands))

    @property
    def pages(self):
        """
        HelpPages cache of this module (rendered on first use).
        """
        return self._help

    def _render(self):
        return paginate(
            list(self._subcommands.values()),
            self._root,
            title=self._title,
            version=self._version,
            links=self._links,
        )

    def help(self, audience, page=1, /):
        """
        Send one help page to an audience, clamping the page number.
        """
        pages = self._help.pages()
        audience.info(*pages[clamp(page, len(pages)) - 1])

    def _help_handler(self, context, /):
        self.help(context.audience, context.get("page", 1))

    def _main_handler(self, context, /):
        if "page" in context:
            self.help(context.audience, context["page"])
        else:
            self._executor(context)

    # ── Registration ─────────────────────────────────────────────────────────

    def build(self, dispatcher, /):
        """
        Register this module's commands against a dispatch backend.

        Parameters
        - dispatcher: Dispatcher
          Any object with register(Registration). Permission checks, parsing
          and name collisions across modules are its responsibility.
        """
        if not callable(getattr(dispatcher, "register", None)):
            raise TypeError(f"{self.__typename__} 'dispatcher' must provide register()")

        head = tuple(Literal(name) for name in self._path[:-1]) + (Literal(self._name, tuple(self._aliases)),)
        page = Binding("page", integer(1, self.maxpage), False)

        registrations = [
            Registration(head + (Literal("help", ("h",)),), (self._permission,), (page,), self._help_handler),
        ]
        for subcommand in self._subcommands.values():
            registrations.append(Registration(
                head + (Literal(subcommand.name, subcommand.aliases),),
                (subcommand.permission,),
                tuple(Binding(argument.name, argument.parser, argument.required) for argument in subcommand.arguments),
                subcommand.executor,
            ))
        registrations.append(Registration(
            head,
            (self._permission,),
            (page,),
            self._help_handler if self._executor is None else self._main_handler,
        ))

        self._built = True
        for registration in registrations:
            dispatcher.register(registration)
        logger.debug("built %r with %d registration(s)", self._root, len(registrations))
        return self

    @property
    def built(self):
        return self._built

    def __rich_repr__(self):
        yield "root", self._root
        yield "permission", self._permission
        yield "aliases", tuple(self._aliases)
        yield "subcommands", tuple(self._subcommands)
        yield "executor", self._executor

    def __repr__(self):
        return f"{self.__typename__}({', '.join(f'{name}={value!r}' for name, value in self.__rich_repr__())})"


def command_module(name, configure=Unset, /, parent=None, **options):
    """
    Create a CommandModule, optionally configuring it in place.

    Forms
    - Plain:     module = command_module("bettermodel")
    - Configure: module = command_module("bettermodel", configure)
      where configure(module) declares subcommands, aliases, etc.

    Parameters
    - parent: CommandModule | None
      Enclosing module (see CommandModule.command_module()).
    - **options: forwarded to CommandModule (title, version, links).
    """
    if not callable(configure) and configure is not Unset:
        raise TypeError("command_module() 'configure' must be callable")
    module = CommandModule(parent, name, **options)
    if configure is not Unset:
        configure(module)
    return module


__all__ = (
    "CommandModule",
    "command_module",
)
