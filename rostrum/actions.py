"""
Rostrum action layer: declare operations, build the trigger table, render help.

What this module provides
- Action: one registered operation (triggers, description, display order,
  timing flag, parameters, callback). Immutable once built.
- @action(...): records an action declaration on a callback (pairs with
  @parameter(...) from rostrum.parameters).
- discover(context): collect the declared callbacks of an object or module in
  definition order.
- Registry: materializes declarations, drops malformed ones with a warning,
  injects the built-in help action and answers trigger lookups.

Quick start
    from rostrum import Registry, action, parameter

    @action("load", "l", descr="Load a file", timed=True)
    @parameter("file")
    @parameter("keepOpen", type=bool, default=True)
    def load(remainder, arguments):
        print(arguments["file"], arguments["keepOpen"])

    registry = Registry([load])
    registry.resolve("l")("-f report.txt")

Callback contract
- an action without parameters is called as callback(remainder);
- an action with parameters is called as callback(remainder, arguments) where
  arguments is the ParsedArguments built from the remainder;
- an awaitable result is driven to completion before the call returns.

Trigger table
- the help action (h, help, ?) is always registered first;
- when two actions declare the same trigger, the one registered later wins.
"""
import asyncio
import inspect
import sys
from types import ModuleType

from rich.console import Console
from rich.text import Text

from .faults import ConfigurationError, DroppedActionWarning, FaultCode, trigger
from .parameters import Parameter, validate
from .parsing import parse
from .utils import Introspectable, Unset, coalesce, rename


def _sanitize_callback(cls, metadata, /):
    if not callable(metadata["callback"]):
        raise ConfigurationError(
            f"{cls.__typename__} callback must be callable",
            title="malformed action",
            code=FaultCode.MALFORMED_ACTION,
            hint="pass the function or method that runs the action",
        )


def _sanitize_triggers(cls, metadata, /):
    """
    Internal: triggers must be a non-empty set of whitespace-free strings.
    """
    if not metadata["triggers"]:
        raise ConfigurationError(
            f"{cls.__typename__} must specify at least one trigger",
            title="missing triggers",
            code=FaultCode.MISSING_TRIGGERS,
            hint="declare the words that run it (for example: @action('load', 'l'))",
        )

    triggers = []
    for name in metadata["triggers"]:
        if not isinstance(name, str) or not name or any(char.isspace() for char in name):
            raise ConfigurationError(
                f"{cls.__typename__} trigger {name!r} must be a single word",
                title="malformed trigger",
                code=FaultCode.MALFORMED_TRIGGER,
                hint="triggers are matched against the first word of the line",
            )
        if name in triggers:
            raise ConfigurationError(
                f"{cls.__typename__} triggers cannot contain duplicates ({name!r})",
                title="malformed trigger",
                code=FaultCode.MALFORMED_TRIGGER,
                hint="list every trigger only once",
            )
        triggers.append(name)
    metadata["triggers"] = tuple(triggers)


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: description, display order and timing flag.

    - descr: Unset → first line of the callback docstring, or "".
    - order: Unset → sys.maxsize (listed last); otherwise an int.
    """
    if not isinstance(descr := metadata["descr"], str | Unset):
        raise ConfigurationError(
            f"{cls.__typename__} description must be a string",
            title="malformed action",
            code=FaultCode.MALFORMED_ACTION,
            hint="describe the action in one short sentence",
        )
    if descr is Unset:
        descr = (inspect.getdoc(metadata["callback"]) or "").strip().partition("\n")[0]
    metadata["descr"] = descr.strip()

    if not isinstance(order := metadata["order"], int | Unset) or isinstance(order, bool):
        raise ConfigurationError(
            f"{cls.__typename__} display order must be an integer",
            title="malformed action",
            code=FaultCode.MALFORMED_ACTION,
            hint="lower numbers are listed first in help",
        )
    metadata["order"] = coalesce(order, sys.maxsize)

    metadata["timed"] = bool(metadata["timed"])


async def _wait(awaitable):
    return await awaitable


class Action(metaclass=Introspectable):
    """
    A registered operation.

    Fields (read-only)
    - triggers: tuple[str, ...]   words that select the action
    - descr: str                  one-line description shown by help
    - order: int                  help position (lower first; sys.maxsize when undeclared)
    - timed: bool                 show the execution time after a successful call
    - parameters: tuple[Parameter, ...]
    - callback: the callable to run

    Construction validates everything, including the parameter set; a
    ConfigurationError means the action must not be registered.
    """

    __introspectable__ = (
        "triggers",
        "descr",
        "order",
        "timed",
        "parameters",
        "callback",
    )

    def __new__(cls, callback, /, *triggers, descr=Unset, order=Unset, timed=False, parameters=()):
        metadata = {
            "triggers": triggers,
            "descr": descr,
            "order": order,
            "timed": timed,
            "parameters": parameters,
            "callback": callback,
        }
        _sanitize_callback(cls, metadata)
        _sanitize_triggers(cls, metadata)
        _sanitize_metadata(cls, metadata)
        metadata["parameters"] = validate(metadata["parameters"])

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @classmethod
    def declared(cls, callback, /):
        """
        Build an Action from the metadata recorded by @action/@parameter.

        Raises
        - ConfigurationError when the callback carries no @action declaration,
          or when any recorded declaration is malformed.
        """
        try:
            triggers, options = callback.__action__
        except AttributeError:
            raise ConfigurationError(
                f"{getattr(callback, '__qualname__', repr(callback))} has no action declaration",
                title="malformed action",
                code=FaultCode.MALFORMED_ACTION,
                hint="decorate it with @action(...)",
            ) from None

        parameters = [
            Parameter(name, *variants, **metadata)
            for name, variants, metadata in getattr(callback, "__action_parameters__", ())
        ]
        return cls(callback, *triggers, parameters=parameters, **options)

    def __call__(self, remainder="", /):
        """
        Run the callback with the argument text that followed the trigger.

        Parsing errors (ParseError) and callback errors propagate to the caller.
        """
        if self._parameters:
            result = self._callback(remainder, parse(remainder, self._parameters))
        else:
            result = self._callback(remainder)

        if inspect.isawaitable(result):
            result = asyncio.run(result if inspect.iscoroutine(result) else _wait(result))
        return result


def action(*triggers, descr=Unset, order=Unset, timed=False):
    """
    Decorator recording an action declaration on a callback.

    Usage
        @action("m", "m1", descr="Test method", order=100, timed=True)
        def method(remainder): ...

    Behavior
    - The callback is returned unchanged (methods stay plain methods); the raw
      declaration is stored and validated when the registry builds the action.
    - Must be applied only once per callback.
    """

    @rename("action")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@action() must be applied to a callable")
        if "__action__" in getattr(callback, "__dict__", {}):
            raise TypeError("@action() must be applied only once")
        try:
            callback.__action__ = (triggers, {"descr": descr, "order": order, "timed": timed})
        except AttributeError:
            raise TypeError("@action() must be applied to a function") from None
        return callback

    return wrapper


def discover(context, /):
    """
    Collect the callbacks declared with @action on an object or module.

    Lookup
    - module: its global namespace, in definition order.
    - object: the namespaces of its class hierarchy, base classes first, each in
      definition order; members are returned bound to the object.

    Returns
    - list of callables, ready to be handed to Registry.
    """
    if isinstance(context, ModuleType):
        namespaces = [vars(context)]
    else:
        namespaces = [vars(klass) for klass in reversed(type(context).__mro__)]

    members = {}
    for namespace in namespaces:
        for name, object in namespace.items():
            members[name] = object

    callbacks = []
    for name, object in members.items():
        if not hasattr(getattr(object, "__func__", object), "__action__"):
            continue
        callbacks.append(getattr(context, name))
    return callbacks


class Registry(metaclass=Introspectable):
    """
    Trigger table built once from host-supplied declarations.

    Declarations
    - an Action instance (already validated), or
    - a callable carrying @action/@parameter metadata (materialized here).

    Behavior
    - the built-in help action (h, help, ?) is registered first, with order 0;
    - a declaration raising ConfigurationError is dropped and reported through a
      DroppedActionWarning (printed in shell mode, warnings.warn otherwise, and
      printed as well when a warnings filter turns it into an error);
    - triggers are flattened into one table, later actions overriding earlier ones.
    """

    __introspectable__ = (
        "actions",
        "triggers",
    )

    def __init__(self, declarations=(), /, *, console=Unset, shell=False, colorful=True, fancy=False):
        self._console = Console() if console is Unset else console
        self._colorful = bool(colorful)

        @rename("help")
        def helper(remainder="", /):
            self._helper(remainder)

        actions = [Action(helper, "h", "help", "?", descr="Displays this message", order=0)]

        for declaration in declarations:
            try:
                actions.append(declaration if isinstance(declaration, Action) else Action.declared(declaration))
            except ConfigurationError as fault:
                name = getattr(declaration, "__qualname__", repr(declaration))
                try:
                    trigger(
                        DroppedActionWarning(
                            f"action {name!r} was not registered: {fault.message}",
                            title="dropped action",
                            code=FaultCode.DROPPED_ACTION,
                            hint=fault.options.get("hint"),
                            declaration=declaration,
                            fault=fault,
                        ),
                        shell=shell,
                        console=self._console,
                        colorful=colorful,
                        fancy=fancy,
                    )
                except DroppedActionWarning as warning:
                    # Escalated by an "error" warnings filter: report it and keep building.
                    self._console.print(warning)

        self._actions = tuple(actions)
        self._triggers = {}
        for action in self._actions:
            for name in action.triggers:
                self._triggers[name] = action

    def resolve(self, name, /):
        """
        Return the Action registered for a trigger, or None.
        """
        return self._triggers.get(name)

    def __contains__(self, name, /):
        return name in self._triggers

    def _helper(self, remainder="", /):
        """
        Print the two-column listing of every registered action plus the exit row.
        """
        style = "bold #00E6FF" if self._colorful else ""

        rows = [
            (", ".join(action.triggers), action.descr)
            for action in sorted(self._actions, key=lambda action: action.order)
        ]
        width = max(len(triggers) for triggers, _ in rows)

        self._console.print()
        self._console.print(Text("Available commands:"))
        for triggers, descr in rows:
            self._console.print(Text.assemble((triggers.rjust(width), style), " : ", descr))
        self._console.print(Text.assemble(("q".rjust(width), style), " : Exit"))
        self._console.print()


__all__ = (
    "Action",
    "Registry",
    "action",
    "discover",
)
