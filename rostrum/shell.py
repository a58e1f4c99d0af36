"""
Rostrum interactive shell: the read-eval loop dispatching lines to actions.

Per line
- "q" (exactly) ends the session;
- the first whitespace-delimited word selects the action, the rest of the line
  (trimmed) is handed to it as argument text;
- an unknown word prints a reminder and waits for the next line;
- parsing errors and callback failures are printed, never fatal;
- timed actions report their wall-clock duration after a successful run.

Example
    from rostrum import Shell, action

    class Context:
        @action("m", "m1", descr="Test method", timed=True)
        def method(self, remainder):
            print("hello", remainder)

    Shell.from_context(Context()).run()
"""
import time
from enum import Enum, auto

from rich.console import Console
from rich.markup import escape
from rich.text import Text

from .actions import Registry, discover
from .faults import FaultCode, HandlerError, ParseError, trigger
from .utils import Introspectable, Unset

EXIT = "q"


class ShellState(Enum):
    IDLE = auto()
    EXECUTING = auto()
    TERMINAL = auto()


class Shell(metaclass=Introspectable):
    """
    Line-oriented dispatch loop over a Registry.

    Parameters
    - declarations: Iterable of Action instances or @action-decorated callables.
    - prompt: str, shown before every read (default ":>").
    - source: Callable[[str], str], returns one line per call (default console.input).
      Raising EOFError ends the session like the exit line does.
    - console: rich Console receiving every message (default: a new stdout Console).
    - colorful / fancy: rendering switches for messages and faults.
    """

    __introspectable__ = (
        "registry",
        "state",
        "prompt",
    )

    __palette__ = {
        "prompt": "bold #00E6FF",
        "unrecognized": "bold #FF4D4D",
        "timing": "#9CE19C",
        "startup": "dim",
    }

    def __init__(self, declarations=(), /, *, prompt=":>", source=Unset, console=Unset, colorful=True, fancy=False):
        if not isinstance(prompt, str):
            raise TypeError("Shell() prompt must be a string")

        self._console = Console() if console is Unset else console
        self._source = self._input if source is Unset else source
        if not callable(self._source):
            raise TypeError("Shell() source must be callable")

        self._prompt = prompt
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._registry = Registry(
            declarations,
            console=self._console,
            shell=True,
            colorful=self._colorful,
            fancy=self._fancy,
        )
        self._state = ShellState.IDLE

    @classmethod
    def from_context(cls, context, /, **options):
        """
        Build a shell from the @action-decorated members of an object or module.
        """
        return cls(discover(context), **options)

    def _input(self, prompt, /):
        return self._console.input(escape(prompt))

    def _text(self, fragment, style):
        return Text(fragment, type(self).__palette__[style] if self._colorful else "")

    def step(self, line, /):
        """
        Dispatch one input line.

        Returns
        - False once the session is over (exit line), True otherwise.
        """
        if self._state is ShellState.TERMINAL:
            return False
        if line == EXIT:
            self._state = ShellState.TERMINAL
            return False

        name, remainder = (line.split(maxsplit=1) + ["", ""])[:2]
        remainder = remainder.strip()

        if (action := self._registry.resolve(name)) is None:
            self._console.print(self._text(
                f"{self._prompt} Unrecognized command '{name}'. Use ? or help for a list of available commands",
                "unrecognized",
            ))
            return True

        self._state = ShellState.EXECUTING
        try:
            started = time.perf_counter()
            action(remainder)
            elapsed = time.perf_counter() - started
        except ParseError as fault:
            self._fault(fault, action=action)
        except Exception as exception:
            fault = HandlerError(
                f"{name}: {type(exception).__name__}: {exception}",
                title="command failed",
                code=FaultCode.HANDLER_FAILURE,
                hint="the command raised an error; the shell is still running",
                exception=exception,
            )
            fault.__cause__ = exception
            self._fault(fault, action=action)
        else:
            if action.timed:
                self._console.print(self._text(f"Method executed in {elapsed:.2f} sec", "timing"))
        finally:
            self._state = ShellState.IDLE
        return True

    def _fault(self, fault, /, **options):
        trigger(
            fault,
            shell=True,
            console=self._console,
            colorful=self._colorful,
            fancy=self._fancy,
            **options,
        )

    def run(self):
        """
        Read and dispatch lines until the exit line or the end of input.
        """
        self._console.print(self._text("Type '?' or 'help' for additional commands...", "startup"))
        while self._state is not ShellState.TERMINAL:
            try:
                line = self._source(self._prompt + " ")
            except EOFError:
                self._state = ShellState.TERMINAL
                break
            self.step(line)


__all__ = (
    "Shell",
    "ShellState",
)
