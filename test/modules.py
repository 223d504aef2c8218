"""
Command module behavioral tests (naming, declarations, registration, dispatch).

Scope
- Validate fully-qualified name/permission composition across nested modules.
- Validate overwrite-on-redeclare, the help cache contract and post-build freezing.
- Validate the exact registrations handed to a dispatcher by build().
- Validate the help-versus-executor tie-break end to end through LocalDispatcher.
- Reproduce the nine-subcommand "bettermodel" scenario.

Conventions
- Test method names follow CamelCase per project convention.
- Audiences and dispatchers are small recording doubles defined below.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from brigade import (
    CommandModule,
    Context,
    LocalDispatcher,
    MissingPermissionError,
    Registration,
    UncastableArgumentError,
    command_module,
    string,
    double,
)


class RecordingDispatcher:
    def __init__(self):
        self.registrations = []

    def register(self, registration, /):
        self.registrations.append(registration)

    def keys(self):
        return [registration.key for registration in self.registrations]


class RecordingAudience:
    def __init__(self):
        self.infos = []
        self.warns = []

    def info(self, *lines):
        self.infos.append([str(line) for line in lines])

    def warn(self, *lines):
        self.warns.append([str(line) for line in lines])


def _noop(sub):
    pass


def _shown(lines, root):
    return [
        line.split(" ")[len(root.split(" "))]
        for line in lines
        if line.startswith(f"/{root} ") and not line.endswith("help command.")
    ]


class TestNaming(TestCase):
    """Behavioral tests for name and permission composition."""

    def testTopLevel(self):
        module = command_module("bettermodel")
        self.assertEqual(module.root, "bettermodel")
        self.assertEqual(module.permission, "bettermodel")
        self.assertEqual(module.path, ("bettermodel",))

    def testConstructorWithoutParent(self):
        module = CommandModule(None, "tool")
        self.assertEqual((module.name, module.root, module.permission), ("tool", "tool", "tool"))

    def testNested(self):
        a = command_module("a")
        b = a.command_module("b")
        c = b.command_module("c")
        self.assertEqual(c.name, "c")
        self.assertEqual(c.root, "a b c")
        self.assertEqual(c.permission, "a.b.c")
        self.assertEqual(c.path, ("a", "b", "c"))

    def testSubcommandPermissionAndRoot(self):
        c = command_module("a").command_module("b").command_module("c")
        subcommand = c.command("x", _noop)
        self.assertEqual(subcommand.permission, "a.b.c.x")
        self.assertEqual(subcommand.root, "a b c")

    def testNamesAreComputedOnce(self):
        parent = command_module("a")
        child = parent.command_module("b")
        parent.with_aliases("alpha")
        self.assertEqual(child.root, "a b")
        self.assertEqual(child.aliases, ())

    def testFramingIsInherited(self):
        parent = command_module("a", title="Alpha", version="2.0", links=(("Wiki", "https://example.org"),))
        child = parent.command_module("b")
        self.assertEqual((child.title, child.version, child.links), ("Alpha", "2.0", (("Wiki", "https://example.org"),)))
        other = parent.command_module("c", version="3.0")
        self.assertEqual(other.version, "3.0")

    def testConfigureCallable(self):
        module = command_module("tool", lambda module: module.with_aliases("t"))
        self.assertEqual(module.aliases, ("t",))

    def testInvalidParentRejected(self):
        with self.assertRaises(TypeError):
            CommandModule("a", "b")

    def testInvalidLinksRejected(self):
        with self.assertRaises(TypeError):
            command_module("a", links=("https://example.org",))


class TestDeclarations(TestCase):
    """Behavioral tests for declarative builder methods."""

    def setUp(self) -> None:
        self.module = command_module("bm")

    def testDecoratorFormReturnsSubcommand(self):
        @self.module.command("reload")
        def reload(sub):
            sub.with_aliases("re", "rl")

        self.assertEqual(reload.name, "reload")
        self.assertIs(self.module.subcommands["reload"], reload)

    def testRedeclarationOverwrites(self):
        self.module.command("a", lambda sub: sub.with_short_description("first"))
        self.module.command("b", _noop)
        self.module.command("a", lambda sub: sub.with_short_description("second"))
        self.assertEqual(list(self.module.subcommands), ["a", "b"])
        self.assertEqual(self.module.subcommands["a"].descr, "second")
        lines = [line.plain for line in self.module.pages.page(1)]
        self.assertIn("/bm a - second", lines)
        self.assertNotIn("/bm a - first", lines)

    def testSubcommandsViewIsReadOnly(self):
        self.module.command("a", _noop)
        with self.assertRaises(TypeError):
            self.module.subcommands["b"] = self.module.subcommands["a"]  # type: ignore[index]

    def testAliasesAndDescription(self):
        self.module.with_aliases("b").with_aliases("bettermodel")
        self.module.with_short_description("one")
        self.module.with_short_description("two")
        self.assertEqual(self.module.aliases, ("b", "bettermodel"))
        self.assertEqual(self.module.descr, "two")

    def testDefaultDescription(self):
        self.assertEqual(self.module.descr, "No description")

    def testMaxpageFollowsSubcommands(self):
        self.assertEqual(self.module.maxpage, 1)
        for index in range(6):
            self.module.command(f"c{index}", _noop)
        self.assertEqual(self.module.maxpage, 2)

    def testHelpCacheReflectsFirstAccess(self):
        self.module.command("a", _noop)
        first = self.module.pages.pages()
        self.module.command("b", _noop)
        self.assertIs(self.module.pages.pages(), first)
        self.assertEqual(_shown([line.plain for line in first[0]], "bm"), ["a"])

    def testFrozenAfterBuild(self):
        self.module.build(RecordingDispatcher())
        self.assertTrue(self.module.built)
        with self.assertRaises(RuntimeError):
            self.module.command("late", _noop)
        with self.assertRaises(RuntimeError):
            self.module.with_aliases("late")
        with self.assertRaises(RuntimeError):
            self.module.executes(lambda context: None)

    def testDecoratorAppliedAfterBuildRejected(self):
        decorator = self.module.command("late")
        self.module.build(RecordingDispatcher())
        with self.assertRaises(RuntimeError):
            decorator(_noop)
        self.assertNotIn("late", self.module.subcommands)

    def testNonCallableExecutorRejected(self):
        with self.assertRaises(TypeError):
            self.module.executes(None)

    def testBuildRequiresDispatcher(self):
        with self.assertRaises(TypeError):
            self.module.build(object())


class TestRegistrations(TestCase):
    """Behavioral tests for what build() hands to the dispatcher."""

    def setUp(self) -> None:
        self.module = command_module("bettermodel")
        self.module.with_aliases("bm")

        def spawn(context):
            pass

        self.spawn = spawn

        @self.module.command("spawn")
        def _(sub):
            sub.with_aliases("s")
            sub.with_required_argument("model", string())
            sub.with_optional_argument("scale", double(0.0))
            sub.executes(spawn)

        self.module.command("reload", _noop)
        self.dispatcher = RecordingDispatcher()

    def testFourKindsInOrder(self):
        self.module.build(self.dispatcher)
        self.assertEqual(self.dispatcher.keys(), [
            ("bettermodel", "help"),
            ("bettermodel", "spawn"),
            ("bettermodel", "reload"),
            ("bettermodel",),
        ])
        self.assertTrue(all(isinstance(registration, Registration) for registration in self.dispatcher.registrations))

    def testHelpRegistration(self):
        self.module.build(self.dispatcher)
        help = self.dispatcher.registrations[0]
        self.assertEqual(help.path[0].aliases, ("bm",))
        self.assertEqual(help.path[1].aliases, ("h",))
        self.assertEqual(help.permissions, ("bettermodel",))
        (page,) = help.arguments
        self.assertEqual((page.name, page.required), ("page", False))
        self.assertEqual((page.parser.min, page.parser.max), (1, 1))

    def testSubcommandRegistration(self):
        self.module.build(self.dispatcher)
        spawn = self.dispatcher.registrations[1]
        self.assertEqual(spawn.path[1].aliases, ("s",))
        self.assertEqual(spawn.permissions, ("bettermodel.spawn",))
        self.assertEqual([(binding.name, binding.required) for binding in spawn.arguments],
                         [("model", True), ("scale", False)])
        self.assertIs(spawn.handler, self.spawn)

    def testNestedModuleRegistersUnderFullPath(self):
        child = self.module.command_module("debug")
        child.with_aliases("dbg")
        child.command("dump", _noop)
        child.build(self.dispatcher)
        self.assertEqual(self.dispatcher.keys(), [
            ("bettermodel", "debug", "help"),
            ("bettermodel", "debug", "dump"),
            ("bettermodel", "debug"),
        ])
        dump = self.dispatcher.registrations[1]
        self.assertEqual(dump.path[0].aliases, ())
        self.assertEqual(dump.path[1].aliases, ("dbg",))
        self.assertEqual(dump.permissions, ("bettermodel.debug.dump",))

    def testParentDoesNotRegisterChildren(self):
        self.module.command_module("debug").command("dump", _noop)
        self.module.build(self.dispatcher)
        self.assertFalse(any("debug" in key for key in self.dispatcher.keys()))


class TestDispatch(TestCase):
    """End-to-end tests through the reference LocalDispatcher."""

    def setUp(self) -> None:
        self.calls = []
        self.audience = RecordingAudience()
        self.dispatcher = LocalDispatcher()

    def _module(self, executes=True, count=7):
        module = command_module("tool")
        module.with_aliases("t")
        for index in range(count):
            module.command(f"c{index}", _noop)

        @module.command("spawn")
        def _(sub):
            sub.with_required_argument("model", string())
            sub.with_optional_argument("scale", double(0.0))
            sub.executes(self.calls.append)

        if executes:
            module.executes(lambda context: self.calls.append("main"))
        return module.build(self.dispatcher)

    def _run(self, prompt):
        return self.dispatcher.dispatch(prompt, sender="tester", audience=self.audience)

    def testNoPageRunsExecutor(self):
        self._module()
        self._run("tool")
        self.assertEqual(self.calls, ["main"])
        self.assertEqual(self.audience.infos, [])

    def testExplicitPageRendersHelp(self):
        self._module()
        self._run("tool 2")
        self.assertEqual(self.calls, [])
        self.assertEqual(len(self.audience.infos), 1)
        self.assertEqual(self.audience.infos[0][-1], "---------< Page 2 / 2 >---------")

    def testWithoutExecutorAlwaysHelp(self):
        self._module(executes=False)
        self._run("tool")
        self._run("t 2")
        self.assertEqual(self.calls, [])
        self.assertEqual([lines[-1] for lines in self.audience.infos], [
            "---------< Page 1 / 2 >---------",
            "---------< Page 2 / 2 >---------",
        ])

    def testHelpLiteralAndAlias(self):
        self._module()
        self._run("tool help")
        self._run("t h 2")
        self.assertEqual(self.calls, [])
        self.assertEqual([lines[-1] for lines in self.audience.infos], [
            "---------< Page 1 / 2 >---------",
            "---------< Page 2 / 2 >---------",
        ])

    def testOutOfRangePageIsRejectedByBackend(self):
        self._module()
        with self.assertRaises(UncastableArgumentError):
            self._run("tool help 3")

    def testDirectHelpClamps(self):
        module = self._module()
        module.help(self.audience, 99)
        module.help(self.audience, -4)
        self.assertEqual([lines[-1] for lines in self.audience.infos], [
            "---------< Page 2 / 2 >---------",
            "---------< Page 1 / 2 >---------",
        ])

    def testRequiredOnlyInvocation(self):
        self._module()
        self._run("tool spawn zombie")
        (context,) = self.calls
        self.assertIsInstance(context, Context)
        self.assertEqual(context["model"], "zombie")
        self.assertNotIn("scale", context)
        self.assertEqual(context.get("scale", 1.0), 1.0)
        self.assertEqual(context.sender, "tester")

    def testRequiredAndOptionalInvocation(self):
        self._module()
        self._run("t spawn zombie 2.5")
        (context,) = self.calls
        self.assertEqual(context["scale"], 2.5)

    def testSubcommandNeedsOnlyItsOwnPermission(self):
        dispatcher = LocalDispatcher(lambda sender, permission: permission == "bm.reload")
        module = command_module("bm")
        module.command("reload", lambda sub: sub.executes(self.calls.append))
        module.build(dispatcher)
        self.assertTrue(dispatcher.dispatch("bm reload", sender="tester", audience=self.audience))
        self.assertEqual(len(self.calls), 1)
        with self.assertRaises(MissingPermissionError):
            dispatcher.dispatch("bm help", audience=self.audience)

    def testExecutorErrorsPropagate(self):
        module = command_module("tool")

        def boom(context):
            raise RuntimeError("boom")

        module.command("fail", lambda sub: sub.executes(boom))
        module.build(self.dispatcher)
        with self.assertRaises(RuntimeError):
            self._run("tool fail")


class TestBetterModelScenario(TestCase):
    """The nine-subcommand module from the original plugin."""

    names = ("reload", "spawn", "test", "disguise", "undisguise", "play", "hide", "show", "version")

    def setUp(self) -> None:
        self.module = command_module("bettermodel")
        self.module.with_aliases("bm")
        for name in self.names:
            self.module.command(name, _noop)

    def testTwoPages(self):
        self.assertEqual(self.module.maxpage, 2)
        pages = self.module.pages.pages()
        self.assertEqual(len(pages), 2)
        self.assertEqual(_shown([line.plain for line in pages[0]], "bettermodel"), list(self.names[:6]))
        self.assertEqual(_shown([line.plain for line in pages[1]], "bettermodel"), list(self.names[6:]))

    def testHelpThroughDispatcher(self):
        dispatcher = LocalDispatcher()
        audience = RecordingAudience()
        self.module.build(dispatcher)
        dispatcher.dispatch("/bm help 2", audience=audience)
        self.assertEqual(_shown(audience.infos[0], "bettermodel"), ["hide", "show", "version"])


if __name__ == "__main__":
    unittest.main()
