"""
Rostrum faults (errors and warnings) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing issue, grouped by
  domain (declarations, invocations, warnings) so logs and searches stay predictable.
- ConsoleException / ConsoleWarning: base types that carry message + options and
  render themselves for rich (header, one-sentence body, a single hint).
- ConfigurationError: a malformed parameter or action declaration (build time).
- ParseError and its subclasses: malformed or ambiguous argument text (invocation time).
- HandlerError: any failure raised by an action callback, wrapped for display.
- DroppedActionWarning: a declaration rejected by the registry (non-fatal).
- trigger(): central entry point to surface any fault (shell → print, otherwise raise/warn).
- getdoc(): optional description lookup for a code from the host application.

Integration
- Declarations raise ConfigurationError directly; the registry catches it and
  triggers a DroppedActionWarning instead of aborting.
- parse() raises ParseError subclasses; the shell catches and prints them.
- The shell wraps callback failures into HandlerError and prints them.
"""
import copy
import inspect
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - declarations (211xx): parameter names, variants, value types, defaults,
      parameter sets and action triggers. raised while declaring/registering.
    - invocations (221xx): argument text that cannot be bound, and failures
      raised by the invoked callback.
    - warnings (231xx): non-fatal notices such as a dropped declaration.

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- parameter declaration errors (211xx) ---
    EMPTY_PARAMETER_NAME        = 21101
    NON_ALPHANUMERIC_NAME       = 21102
    NON_LETTER_NAME_START       = 21103
    MALFORMED_PARAMETER         = 21104
    UNDASHED_VARIANT            = 21111
    MALFORMED_SHORT_VARIANT     = 21112
    MALFORMED_LONG_VARIANT      = 21113
    DUPLICATED_VARIANT          = 21114
    UNSUPPORTED_TYPE            = 21121
    UNCONVERTIBLE_DEFAULT       = 21122

    # --- parameter set errors (211xx) ---
    DUPLICATED_PARAMETER        = 21131
    SHARED_VARIANT              = 21132

    # --- action declaration errors (211xx) ---
    MISSING_TRIGGERS            = 21141
    MALFORMED_TRIGGER           = 21142
    MALFORMED_ACTION            = 21143

    # --- invocation errors (221xx) ---
    AMBIGUOUS_PARAMETER         = 22101
    UNTERMINATED_VALUE          = 22102
    UNCONVERTIBLE_VALUE         = 22103
    HANDLER_FAILURE             = 22131

    # --- warnings (231xx) ---
    DROPPED_ACTION              = 23101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, /):
    """
    build the rich renderable shared by every fault type.

    layout: "[ prog — code | title ]", then the message, then "→ hint";
    wrapped in a Panel when the 'fancy' option is set.
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    prog = getattr(main, "__prog__", options.get("prog", "rostrum"))
    code = options.get("code")

    header = Text.assemble(
        "[ ",
        text(prog, "prog-name"),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "-", "code"),
        " | ",
        text(str(options.get("title", type(fault).__name__)).title(), "title"),
        " ]"
    )
    message = text(fault.message, "message")

    renders = [message]
    if hint := options.get("hint"):
        renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if fancy:
        return Panel(Group(*renders), title=header, title_align="left")
    return Group(header, *renders)


class ConsoleException(Exception):
    """
    base error: a message plus immutable rendering/context options.

    common options
    - title, code, hint: shown in the rendered fault.
    - shell, console, colorful, fancy: how trigger() surfaces it.
    - any context the reporter may want (parameter, input, action, exception...).
    """
    __palette__ = {
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #00E5FF",  # neon cyan fault code
        "title": "bold #FF4DA6",  # pinky title
        "message": "#C8C8D0",  # soft light gray message
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
    }

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, type(self).__palette__)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        replica = type(self)(self.message, **{**self.options, **overrides})
        replica.__cause__ = self.__cause__
        return replica


class ConfigurationError(ConsoleException, ValueError): ...


class ParseError(ConsoleException, ValueError): ...
class AmbiguousParameterError(ParseError): ...
class UnterminatedValueError(ParseError): ...
class UnconvertibleValueError(ParseError): ...


class HandlerError(ConsoleException):
    @property
    def exception(self):
        """the exception raised by the callback (also chained as __cause__)."""
        return self.options.get("exception")


class ConsoleWarning(Warning):
    """
    base warning: same shape as ConsoleException, surfaced through warnings.warn
    outside shell mode and printed to the sink in shell mode.
    """
    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",  # amber fault code for warnings
        "title": "bold #FFC2E0",  # softer pinky title
        "message": "#D6D6DE",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
    }

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, type(self).__palette__)

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DroppedActionWarning(ConsoleWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace() before triggering.
    - shell=True prints to the 'console' option (or the module stderr console);
      otherwise errors are raised and warnings are emitted via warnings.warn.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    returns None when no documentation is found.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ConsoleException",
    "ConfigurationError",
    "ParseError",
    "AmbiguousParameterError",
    "UnterminatedValueError",
    "UnconvertibleValueError",
    "HandlerError",
    "ConsoleWarning",
    "DroppedActionWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
