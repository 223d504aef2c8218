import sys

from rich.pretty import pprint

from brigade import *

module = command_module(
    "bettermodel",
    title="BetterModel",
    version="1.0.0",
    links=(
        ("Wiki", "https://github.com/toxicity188/BetterModel/wiki"),
        ("Download", "https://modrinth.com/plugin/bettermodel/versions"),
    ),
)
module.with_aliases("bm")


def echo(label):
    def executor(context):
        context.audience.info(f"{label}: {dict(context.values)}")
    return executor


@module.command("reload")
def reload(sub):
    sub.with_aliases("re", "rl")
    sub.with_short_description("reloads this plugin.")
    sub.executes(echo("reload"))


@module.command("spawn")
def spawn(sub):
    sub.with_short_description("summons some model to given type")
    sub.with_aliases("s")
    sub.with_required_argument("model", string())
    sub.with_optional_argument("type", string())
    sub.with_optional_argument("scale", double(0.0))
    sub.executes(echo("spawn"))


@module.command("test")
def test(sub):
    sub.with_short_description("Tests some model's animation to specific player")
    sub.with_aliases("t")
    sub.with_required_argument("model", string())
    sub.with_required_argument("animation", string())
    sub.with_optional_argument("player", string())
    sub.executes(echo("test"))


@module.command("disguise")
def disguise(sub):
    sub.with_short_description("disguises self.")
    sub.with_aliases("d")
    sub.with_required_argument("model", string())
    sub.executes(echo("disguise"))


@module.command("undisguise")
def undisguise(sub):
    sub.with_short_description("undisguises self.")
    sub.with_aliases("ud")
    sub.with_optional_argument("model", string())
    sub.executes(echo("undisguise"))


@module.command("play")
def play(sub):
    sub.with_short_description("plays player animation.")
    sub.with_aliases("p")
    sub.with_required_argument("limb", string())
    sub.with_required_argument("animation", string())
    sub.with_optional_argument("loop_type", string())
    sub.with_optional_argument("hide", boolean())
    sub.executes(echo("play"))


@module.command("hide")
def hide(sub):
    sub.with_short_description("hides some entities from target player.")
    sub.with_required_argument("model", string())
    sub.with_required_argument("player", string())
    sub.with_required_argument("entities", string())
    sub.executes(echo("hide"))


@module.command("show")
def show(sub):
    sub.with_short_description("shows some entities to target player.")
    sub.with_required_argument("model", string())
    sub.with_required_argument("player", string())
    sub.with_required_argument("entities", string())
    sub.executes(echo("show"))


@module.command("version")
def version(sub):
    sub.with_short_description("checks BetterModel's version.")
    sub.with_aliases("v")
    sub.executes(lambda context: context.audience.info(f"Current: {module.version}"))


if __name__ == '__main__':
    dispatcher = LocalDispatcher(shell=True)
    module.build(dispatcher)
    if len(sys.argv) > 1:
        dispatcher.dispatch([module.name, *sys.argv[1:]], sender="console")
    else:
        pprint(module)
