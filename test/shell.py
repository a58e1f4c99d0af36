"""
Interactive shell behavioral tests.

Scope
- step(): exit line, unknown triggers, dispatch, state transitions.
- Faults: parse errors and callback failures are printed and never end the session.
- Timing report for timed actions.
- run(): startup hint, scripted input, end of input.

Conventions
- Test method names follow CamelCase per project convention.
- Input comes from a scripted source; output is captured in memory without colors.
"""
import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from rostrum import Action, Parameter, Shell, ShellState, action, parameter


class Script:
    """Line source replaying fixed lines, then signalling end of input."""

    def __init__(self, *lines):
        self.lines = list(lines)
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)


class TestShell(TestCase):

    def setUp(self):
        self.console = Console(file=io.StringIO(), width=200, color_system=None)
        self.received = []

    def shell(self, *declarations, **options):
        return Shell(declarations, console=self.console, colorful=False, **options)

    @property
    def output(self):
        return self.console.file.getvalue()

    def testExitLine(self):
        shell = self.shell()
        self.assertIs(shell.state, ShellState.IDLE)
        self.assertFalse(shell.step("q"))
        self.assertIs(shell.state, ShellState.TERMINAL)
        self.assertFalse(shell.step("h"))
        self.assertEqual(self.output, "")

    def testExitLineMustBeExact(self):
        shell = self.shell()
        self.assertTrue(shell.step("q now"))
        self.assertIs(shell.state, ShellState.IDLE)
        self.assertIn("Unrecognized command 'q'", self.output)

    def testUnrecognizedTrigger(self):
        shell = self.shell(Action(self.received.append, "m"))
        self.assertTrue(shell.step("zz"))
        self.assertIs(shell.state, ShellState.IDLE)
        self.assertEqual(
            self.output,
            ":> Unrecognized command 'zz'. Use ? or help for a list of available commands\n",
        )
        self.assertTrue(shell.step("m next"))
        self.assertEqual(self.received, ["next"])

    def testRemainderIsTrimmed(self):
        shell = self.shell(Action(self.received.append, "m"))
        shell.step("  m   hello  world  ")
        self.assertEqual(self.received, ["hello  world"])

    def testEmptyRemainder(self):
        shell = self.shell(Action(self.received.append, "m"))
        shell.step("m")
        self.assertEqual(self.received, [""])

    def testParametersAreParsed(self):
        @action("load")
        @parameter("file")
        @parameter("value", type=int, default=1000)
        def load(remainder, arguments):
            self.received.append(dict(arguments))

        self.shell(load).step('load --file "a b.txt" --value 7')
        self.assertEqual(self.received, [{"file": "a b.txt", "value": 7}])

    def testStateIsExecutingDuringCallback(self):
        shell = self.shell(Action(lambda remainder: self.received.append(shell.state), "m"))
        shell.step("m")
        self.assertEqual(self.received, [ShellState.EXECUTING])
        self.assertIs(shell.state, ShellState.IDLE)

    def testParseErrorIsPrinted(self):
        shell = self.shell(Action(lambda remainder, arguments: None, "load", parameters=[Parameter("file")]))
        self.assertTrue(shell.step("load -f a.txt --file b.txt"))
        self.assertIs(shell.state, ShellState.IDLE)
        self.assertIn("ambiguous: multiple variants of file supplied", self.output)
        self.assertIn("22101", self.output)

    def testHandlerFailureIsPrinted(self):
        def fail(remainder):
            raise RuntimeError("boom")

        shell = self.shell(Action(fail, "f", timed=True))
        self.assertTrue(shell.step("f"))
        self.assertIs(shell.state, ShellState.IDLE)
        self.assertIn("RuntimeError: boom", self.output)
        self.assertIn("Command Failed", self.output)
        self.assertNotIn("Method executed in", self.output)

    def testTimedActionReportsDuration(self):
        shell = self.shell(Action(self.received.append, "m", timed=True))
        shell.step("m")
        self.assertRegex(self.output, r"^Method executed in \d+\.\d\d sec\n$")

    def testUntimedActionIsSilent(self):
        self.shell(Action(self.received.append, "m")).step("m")
        self.assertEqual(self.output, "")

    def testAsyncActionIsAwaited(self):
        async def method(remainder):
            self.received.append(remainder)

        self.shell(Action(method, "m")).step("m x")
        self.assertEqual(self.received, ["x"])

    def testHelpAction(self):
        shell = self.shell(Action(self.received.append, "m", "m1", descr="Test method"))
        shell.step("?")
        self.assertIn("Available commands:", self.output)
        self.assertIn("     m, m1 : Test method", self.output)
        self.assertIn("         q : Exit", self.output)

    def testRun(self):
        source = Script("zz", "m one", "m two", "q", "m never")
        shell = self.shell(Action(self.received.append, "m"), source=source)
        shell.run()
        self.assertEqual(self.received, ["one", "two"])
        self.assertIs(shell.state, ShellState.TERMINAL)
        self.assertEqual(source.prompts, [":> "] * 4)
        self.assertEqual(source.lines, ["m never"])
        self.assertTrue(self.output.startswith("Type '?' or 'help' for additional commands...\n"))

    def testRunSurvivesFailures(self):
        def fail(remainder):
            raise ValueError("bad")

        source = Script("f", "m after")
        shell = self.shell(Action(fail, "f"), Action(self.received.append, "m"), source=source)
        shell.run()
        self.assertEqual(self.received, ["after"])
        self.assertIs(shell.state, ShellState.TERMINAL)

    def testRunEndsOnEndOfInput(self):
        shell = self.shell(source=Script())
        shell.run()
        self.assertIs(shell.state, ShellState.TERMINAL)

    def testCustomPrompt(self):
        source = Script("zz")
        self.shell(prompt=">>", source=source).run()
        self.assertEqual(source.prompts, [">> ", ">> "])
        self.assertIn(">> Unrecognized command 'zz'.", self.output)

    def testDefaultSourceShowsPromptLiterally(self):
        shell = self.shell(prompt="[dev]>")
        with mock.patch("builtins.input", side_effect=EOFError):
            shell.run()
        self.assertIn("[dev]>", self.output)
        self.assertIs(shell.state, ShellState.TERMINAL)

    def testFromContext(self):
        received = self.received

        class Context:
            @action("m", "m1", descr="Test method", order=100, timed=True)
            def method(self, remainder):
                received.append((self, remainder))

        context = Context()
        shell = Shell.from_context(context, console=self.console, colorful=False)
        shell.step("m1 x")
        self.assertEqual(received, [(context, "x")])
        self.assertEqual([a.triggers for a in shell.registry.actions], [("h", "help", "?"), ("m", "m1")])

    def testDroppedDeclarationIsReported(self):
        @action("bad")
        @parameter("recordsToRead")
        @parameter("recordsToWrite")
        def bad(remainder, arguments):
            pass

        shell = self.shell(bad)
        self.assertIsNone(shell.registry.resolve("bad"))
        self.assertIn("Dropped Action", self.output)

    def testPromptMustBeString(self):
        with self.assertRaises(TypeError):
            Shell(prompt=None, console=self.console)


if __name__ == "__main__":
    unittest.main()
