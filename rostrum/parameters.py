r"""
Rostrum parameter declarations and their validation.

Overview
- Parameter: one named, typed argument of an action, with the textual variants
  the operator may use to supply it (e.g., -f / --file).
- validate(parameters): checks a whole parameter set for name and variant collisions.
- @parameter(...): records a parameter declaration on an action callback; the
  registry materializes and validates it when it builds the action.

Rules (enforced on construction, raising ConfigurationError)
- name: non-empty, letters and digits only, starting with a letter; case-sensitive.
- variants: each one is either "-" + one letter or "--" + a word of two or more
  characters (letter first, then letters, digits or hyphens). Without explicit
  variants, ("-" + name[0], "--" + name) is used. No repeats inside one parameter.
- type: str, bool, int, float or datetime (defaults to str).
- default: converted to the type at construction; None means “no default”, in
  which case the zero value of the type is used ("", False, 0, 0.0, datetime.min).

Example
    >>> Parameter("file")
    parameter(name='file', variants=('-f', '--file'), type=<class 'str'>, default='')
    >>> Parameter("recordsToRead", "-r", "--read", type=int, default=1000).default
    1000
"""
import re

from .faults import ConfigurationError, FaultCode
from .utils import Introspectable
from .values import TYPES, zero, coerce


def _sanitize_name(cls, metadata, /):
    """
    Internal: validate the parameter name.

    Checks, in order: string type, non-blank, letters/digits only, letter first.
    """
    if not isinstance(name := metadata["name"], str):
        raise ConfigurationError(
            f"{cls.__typename__} name must be a string, got {type(name).__name__}",
            title="malformed parameter",
            code=FaultCode.MALFORMED_PARAMETER,
            hint="declare parameters with a textual name (for example: Parameter('file'))",
        )
    if not name.strip():
        raise ConfigurationError(
            f"must provide {cls.__typename__} name",
            title="empty parameter name",
            code=FaultCode.EMPTY_PARAMETER_NAME,
            hint="give the parameter a name made of letters and digits",
        )
    if not all(char.isalnum() for char in name):
        raise ConfigurationError(
            f"{cls.__typename__} name {name!r} must only contain letters and digits",
            title="malformed parameter name",
            code=FaultCode.NON_ALPHANUMERIC_NAME,
            hint="remove spaces, dashes and underscores (for example: keepOpen)",
        )
    if not name[0].isalpha():
        raise ConfigurationError(
            f"{cls.__typename__} name {name!r} must start with a letter",
            title="malformed parameter name",
            code=FaultCode.NON_LETTER_NAME_START,
            hint="move the digits after the first letter",
        )


def _sanitize_variants(cls, metadata, /):
    r"""
    Internal: validate and normalize the textual variants.

    Shapes
    - short: r"-[^\W\d_]"                  (a dash and exactly one letter)
    - long:  r"--[^\W\d_](?:[^\W_]|-)+"    (two dashes and a word of 2+ characters)
    """
    name = metadata["name"]
    variants = metadata["variants"] or ("-" + name[0], "--" + name)

    sanitized = []
    for variant in variants:
        if not isinstance(variant, str):
            raise ConfigurationError(
                f"{cls.__typename__} {name!r} variants must be strings",
                title="malformed parameter",
                code=FaultCode.MALFORMED_PARAMETER,
                hint="declare variants as text (for example: '-f', '--file')",
            )
        if not variant.startswith("-"):
            raise ConfigurationError(
                f"{cls.__typename__} {name!r} variant {variant!r} must start with -",
                title="malformed variant",
                code=FaultCode.UNDASHED_VARIANT,
                hint="prefix the variant with - or -- (for example: -f or --file)",
            )
        if variant.startswith("--"):
            if len(variant) - 2 < 2:
                raise ConfigurationError(
                    f"{cls.__typename__} {name!r} variant {variant!r} starting with -- must be more than one letter",
                    title="malformed variant",
                    code=FaultCode.MALFORMED_LONG_VARIANT,
                    hint="use a single dash for one-letter variants (for example: -f)",
                )
            if not re.fullmatch(r"--[^\W\d_](?:[^\W_]|-)+", variant):
                raise ConfigurationError(
                    f"{cls.__typename__} {name!r} variant {variant!r} must be a word after --",
                    title="malformed variant",
                    code=FaultCode.MALFORMED_LONG_VARIANT,
                    hint="start with a letter, then use letters, digits or dashes (for example: --max-memory)",
                )
        elif not re.fullmatch(r"-[^\W\d_]", variant):
            raise ConfigurationError(
                f"{cls.__typename__} {name!r} variant {variant!r} starting with - must be a single letter",
                title="malformed variant",
                code=FaultCode.MALFORMED_SHORT_VARIANT,
                hint="use -X for one letter or --word for longer spellings",
            )
        if variant in sanitized:
            raise ConfigurationError(
                f"{cls.__typename__} {name!r} variants cannot contain duplicates ({variant!r})",
                title="duplicated variant",
                code=FaultCode.DUPLICATED_VARIANT,
                hint="list every spelling only once",
            )
        sanitized.append(variant)

    metadata["variants"] = tuple(sanitized)


def _sanitize_value(cls, metadata, /):
    """
    Internal: validate the value type and materialize the default.
    """
    name = metadata["name"]

    if metadata["type"] not in TYPES:
        raise ConfigurationError(
            f"{cls.__typename__} {name!r} type {metadata['type']!r} is not supported",
            title="unsupported type",
            code=FaultCode.UNSUPPORTED_TYPE,
            hint="use one of: %s" % ", ".join(type.__name__ for type in TYPES),
        )

    if metadata["default"] is None:
        metadata["default"] = zero(metadata["type"])
        return

    try:
        metadata["default"] = coerce(metadata["default"], metadata["type"])
    except (TypeError, ValueError, OverflowError) as exception:
        raise ConfigurationError(
            f"{cls.__typename__} {name!r} default {metadata['default']!r} cannot be converted to {metadata['type'].__name__}",
            title="unconvertible default",
            code=FaultCode.UNCONVERTIBLE_DEFAULT,
            hint="declare a default of the parameter's type",
        ) from exception


class Parameter(metaclass=Introspectable):
    """
    Named, typed argument of an action.

    Instances are immutable: every field is exposed through a read-only property.
    Validation happens entirely in the constructor, so an existing Parameter is
    always well-formed on its own; collisions with sibling parameters are the
    concern of validate().
    """

    __introspectable__ = (
        "name",
        "variants",
        "type",
        "default",
    )

    def __new__(cls, name, /, *variants, type=str, default=None):
        """
        Construct a Parameter.

        Parameters
        - name: str
          Key of the value in the parsed arguments.
        - variants: str
          Accepted spellings; defaults to ("-" + name[0], "--" + name).
        - type: str | bool | int | float | datetime
          Target value type.
        - default: Any | None
          Value used when the parameter is absent from the input line.

        Raises
        - ConfigurationError on any malformed field.
        """
        metadata = {
            "name": name,
            "variants": variants,
            "type": type,
            "default": default,
        }
        _sanitize_name(cls, metadata)
        _sanitize_variants(cls, metadata)
        _sanitize_value(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


def validate(parameters, /):
    """
    Validate the full parameter set of one action.

    Checks
    - every item is a Parameter;
    - parameter names are pairwise distinct (case-sensitive);
    - no variant string is shared by two parameters.

    Returns
    - tuple[Parameter, ...] in declaration order.

    Raises
    - ConfigurationError on the first violation found.
    """
    names = set()
    owners = {}

    for parameter in (parameters := tuple(parameters)):
        if not isinstance(parameter, Parameter):
            raise ConfigurationError(
                f"expected a parameter, got {type(parameter).__name__}",
                title="malformed parameter",
                code=FaultCode.MALFORMED_PARAMETER,
                hint="declare parameters with Parameter(...) or @parameter(...)",
            )
        if parameter.name in names:
            raise ConfigurationError(
                f"parameter name {parameter.name!r} is already in use",
                title="duplicated parameter",
                code=FaultCode.DUPLICATED_PARAMETER,
                hint="give every parameter of an action its own name",
                parameter=parameter,
            )
        names.add(parameter.name)

        for variant in parameter.variants:
            if (owner := owners.setdefault(variant, parameter.name)) != parameter.name:
                raise ConfigurationError(
                    f"variant {variant!r} of parameter {parameter.name!r} is already used by {owner!r}",
                    title="shared variant",
                    code=FaultCode.SHARED_VARIANT,
                    hint="declare explicit variants (for example: Parameter(%r, '-x', '--%s'))" % (
                        parameter.name, parameter.name
                    ),
                    parameter=parameter,
                )

    return parameters


def parameter(name, /, *variants, type=str, default=None):
    """
    Decorator recording a parameter declaration on an action callback.

    Usage
        @action("load", descr="Loads a file")
        @parameter("file")
        @parameter("keepOpen", type=bool, default=True)
        def load(remainder, arguments): ...

    Behavior
    - Nothing is validated here: the raw declaration is stored and turned into a
      Parameter when the action is materialized, so a malformed declaration only
      drops its own action.
    - Stacked declarations keep their source order (top-most first).
    """
    declaration = (name, variants, {"type": type, "default": default})

    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@parameter() must be applied to a callable")
        try:
            declarations = callback.__dict__.setdefault("__action_parameters__", [])
        except AttributeError:
            raise TypeError("@parameter() must be applied to a function") from None
        declarations.insert(0, declaration)
        return callback

    return wrapper


__all__ = (
    "Parameter",
    "validate",
    "parameter",
)
