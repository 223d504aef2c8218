"""
Brigade help pages: deterministic pagination of a module's subcommands.

What this module provides
- maxpage(count): number of help pages for `count` subcommands (count // 6 + 1).
- clamp(page, last): bring a user-supplied page number into [1, last].
- paginate(subcommands, root, /, ...): pure renderer producing every page at once.
- HelpPages: compute-once cache of paginate() for one module.

Page layout (plain text, styles omitted)
    page 1                                   pages 2..N
    ""                                       ""
    "------ <title> <version> ------"        "------ <title> <version> ------"
    ""                                       ""
    " [Wiki] [Download]"   (links, if any)
    ""
    "    <arg>  - required"
    "    [arg]  - optional"
    ""
    <entries 0..5>                           <entries 6(i-1)..6i-1>
    "/<root> [help] [page] - help command."  (same)
    ""                                       ""
    "---------< Page i / N >---------"       (same)

Entry line
- "/<root> <name> <placeholders...> - <descr>", placeholders "<x>" for required and
  "[x]" for optional arguments, in declared order.
- Interactive metadata rides on rich Style.meta (the rendering collaborator decides
  what to do with it):
  • entry:    {"hover": "[Aliases:\\n...]\\n\\nClick to suggest command.", "suggest": "/<root> <name>"}
  • argument: {"hover": "<type label>"}
  • link:     {"hover": "<url>\\n\\nClick to open link."} plus Style(link=url)

Pagination contract
- Page size is fixed at 6 and the page count is always count // 6 + 1, so an exact
  multiple of 6 yields one trailing page carrying framing only.
- Page i holds the subcommands at [6(i-1), min(6i, count)) in insertion order.

Caching contract
- HelpPages renders on first access and serves the same pages for the rest of the
  module's lifetime; subcommands declared afterwards do not show up.
- The first render is guarded by a lock, so concurrent first accesses render once
  and every caller sees complete pages.

Palette keys
- root-name, entry-name, required, optional, separator, description,
  banner, legend, link, hint, footer
- Define a mapping named __styles__ in __main__ to override any palette entry.
"""
import logging
import sys
from collections import defaultdict

from rich.style import Style
from rich.text import Text

from .utils import Once, Unset

logger = logging.getLogger(__name__)

PAGE_SIZE = 6


def maxpage(count, /):
    """
    Number of help pages for `count` subcommands.

    Examples
    - maxpage(0)  -> 1
    - maxpage(6)  -> 2   (second page carries framing only)
    - maxpage(7)  -> 2
    - maxpage(12) -> 3
    """
    if not isinstance(count, int) or count < 0:
        raise ValueError("maxpage() argument must be a non-negative integer")
    return count // PAGE_SIZE + 1


def clamp(page, last, /):
    return min(max(page, 1), last)


def _styles():
    return defaultdict(str, {
        # === Entries ===
        "root-name": "yellow",
        "entry-name": "",
        "required": "red",
        "optional": "dark_cyan",
        "separator": "bright_black",
        "description": "grey70",

        # === Framing ===
        "banner": "grey70",
        "legend": "",
        "link": "bold cyan",
        "hint": "bright_magenta",
        "footer": "grey70",
    } | getattr(sys.modules["__main__"], "__styles__", {}))


def _typelabel(text, /):
    return text.lower().replace("_", " ")


def render_argument(argument, /, styles=Unset):
    styles = _styles() if styles is Unset else styles
    text = Text(argument.placeholder, styles["required" if argument.required else "optional"])
    text.stylize(Style(meta={"hover": _typelabel(argument.typename)}))
    return text


def render_entry(subcommand, /, styles=Unset):
    """
    Render one subcommand as a single help line with hover/suggest metadata.
    """
    styles = _styles() if styles is Unset else styles
    line = Text()
    line.append(f"/{subcommand.root}", styles["root-name"])
    line.append(" ")
    line.append(subcommand.name, styles["entry-name"])
    for argument in subcommand.arguments:
        line.append(" ")
        line.append_text(render_argument(argument, styles))
    line.append(" - ", styles["separator"])
    line.append(subcommand.descr, styles["description"])

    hover = "\n\nClick to suggest command."
    if subcommand.aliases:
        hover = "Aliases:\n" + "\n".join(subcommand.aliases) + hover
    line.stylize(Style(meta={"hover": hover, "suggest": subcommand.suggestion}))
    return line


def _banner(title, version, styles):
    label = title if version is Unset or version is None else f"{title} {version}"
    return Text(f"------ {label} ------", styles["banner"])


def _links(links, styles):
    line = Text(style="bold")
    for label, url in links:
        line.append(" ")
        line.append(f"[{label}]", styles["link"])
        line.stylize(Style(link=url, meta={"hover": f"{url}\n\nClick to open link."}), len(line) - len(label) - 2)
    return line


def _legend(styles):
    return [
        Text.assemble(("    <arg>", styles["required"]), " ", (" - required", styles["legend"])),
        Text.assemble(("    [arg]", styles["optional"]), " ", (" - optional", styles["legend"])),
    ]


def paginate(subcommands, root, /, title=Unset, version=Unset, links=()):
    """
    Render every help page for an ordered collection of subcommands.

    Parameters
    - subcommands: Iterable[Subcommand]
      Entries in display order (a module passes its insertion-ordered values).
    - root: str
      Fully-qualified module name used in the "/<root> [help] [page]" hint.
    - title: str | Unset
      Banner title; defaults to the first word of `root`.
    - version: str | Unset
      Banner version; omitted when Unset.
    - links: Iterable[tuple[str, str]]
      (label, url) pairs rendered on page 1 only.

    Returns
    - tuple[tuple[Text, ...], ...]: maxpage(count) pages, each a tuple of lines.
    """
    styles = _styles()
    entries = [render_entry(subcommand, styles) for subcommand in subcommands]
    last = maxpage(len(entries))
    title = root.split(" ", 1)[0] if title is Unset else title
    links = tuple(links)

    prefix = [Text(), _banner(title, version, styles), Text()]
    full = list(prefix)
    if links:
        full += [_links(links, styles), Text()]
    full += _legend(styles)
    full.append(Text())

    pages = []
    for index in range(1, last + 1):
        lines = list(full if index == 1 else prefix)
        lines += entries[PAGE_SIZE * (index - 1):min(PAGE_SIZE * index, len(entries))]
        lines.append(Text(f"/{root} [help] [page] - help command.", styles["hint"]))
        lines.append(Text())
        lines.append(Text(f"---------< Page {index} / {last} >---------", styles["footer"]))
        pages.append(tuple(lines))

    logger.debug("rendered %d help page(s) for %r", last, root)
    return tuple(pages)


class HelpPages:
    """
    Compute-once help cache for one module.

    Parameters
    - source: Callable[[], tuple[tuple[Text, ...], ...]]
      Zero-argument callable rendering the pages (typically a closure over
      paginate() and the module's live subcommand mapping).

    Behavior
    - The first call to pages()/page()/len() renders, later calls reuse the result.
    - page(i) indexes 1-based and raises IndexError outside [1, len(self)];
      callers clamp user input first.
    """

    __slots__ = ("_cell",)

    def __init__(self, source, /):
        self._cell = Once(source)

    @property
    def rendered(self):
        return self._cell.filled

    def pages(self):
        return self._cell()

    def page(self, index, /):
        pages = self._cell()
        if not 1 <= index <= len(pages):
            raise IndexError(f"help page {index} is out of range [1, {len(pages)}]")
        return pages[index - 1]

    def __len__(self):
        return len(self._cell())


__all__ = (
    "PAGE_SIZE",
    "maxpage",
    "clamp",
    "paginate",
    "render_entry",
    "render_argument",
    "HelpPages",
)
