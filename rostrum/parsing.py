"""
Rostrum argument parsing: bind the text after a trigger to declared parameters.

How a line is read
- every declared parameter is looked up on its own, so the order in which the
  operator types parameters does not matter;
- a parameter is found by searching the line for "<variant> " (variant followed
  by one space), for each of its variants;
- the value starts right after that space: a value opening with a double quote
  runs to the next double quote (quotes are dropped), any other value runs to
  the next space;
- the raw value is converted to the parameter's type; absent parameters keep
  their default.

Grammar quirks
- matching is substring based: a quoted value that contains another
  parameter's variant followed by a space can be picked up as that parameter;
- the same variant typed twice is not reported, the first occurrence wins;
  only two *different* variants of one parameter are reported as ambiguous.
"""
from collections.abc import Mapping
from types import MappingProxyType

from .faults import (
    AmbiguousParameterError,
    UnterminatedValueError,
    UnconvertibleValueError,
    FaultCode,
)
from .values import convert

QUOTE = '"'


class ParsedArguments(Mapping):
    """
    Read-only, ordered mapping from parameter name to typed value.

    Always fully populated: one entry per declared parameter, in declaration
    order. Values are reached by key only, since a parameter may be named like
    a mapping method (values, keys, get...):
    - arguments["file"]
    - arguments.expect("file", str)   (asserts the stored type)
    """
    __slots__ = ("_values",)

    def __init__(self, values=(), /):
        object.__setattr__(self, "_values", MappingProxyType(dict(values)))

    def __getitem__(self, name, /):
        return self._values[name]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __setattr__(self, name, value, /):
        raise AttributeError("parsed arguments are read-only")

    def __repr__(self):
        return f"parsed-arguments({", ".join("%s=%r" % item for item in self._values.items())})"

    def __rich_repr__(self):
        yield from self._values.items()

    def expect(self, name, type, /):
        """
        Return the value of 'name', asserting it is an instance of 'type'.

        Raises
        - KeyError when no such parameter was declared.
        - TypeError when the stored value has another type.
        """
        value = self._values[name]
        if not isinstance(value, type):
            raise TypeError(f"argument {name!r} is {value!r}, not {type.__name__}")
        return value


def _extract(line, parameter):
    """
    Locate and slice the raw value of one parameter.

    Returns
    - str: the raw value text.
    - None: when no variant of the parameter occurs in the line.
    """
    matched = [variant for variant in parameter.variants if f"{variant} " in line]

    if len(matched) > 1:
        raise AmbiguousParameterError(
            f"ambiguous: multiple variants of {parameter.name} supplied",
            title="ambiguous parameter",
            code=FaultCode.AMBIGUOUS_PARAMETER,
            hint="use only one of %s" % ", ".join(matched),
            parameter=parameter,
            input=line.rstrip(" "),
            variants=tuple(matched),
        )
    if not matched:
        return None

    variant, = matched
    start = line.index(f"{variant} ") + len(variant) + 1

    quoted = line.startswith(QUOTE, start)
    offset = 1 if quoted else 0
    end = line.find(QUOTE if quoted else " ", start + offset)

    if end == -1:
        raise UnterminatedValueError(
            f"unterminated value for {parameter.name}",
            title="unterminated value",
            code=FaultCode.UNTERMINATED_VALUE,
            hint=(
                "close the quoted value (for example: %s \"a value\")" % variant
                if quoted else
                "add a value after %s" % variant
            ),
            parameter=parameter,
            input=line.rstrip(" "),
            variant=variant,
        )

    return line[start + offset:end]


def parse(line, parameters, /):
    """
    Parse the argument text of one invocation.

    Parameters
    - line: str
      Text that followed the trigger on the input line.
    - parameters: Iterable[Parameter]
      The action's (already validated) parameters.

    Returns
    - ParsedArguments, one entry per parameter.

    Raises
    - AmbiguousParameterError: two different variants of one parameter are present.
    - UnterminatedValueError: a value has no closing quote / trailing delimiter.
    - UnconvertibleValueError: a value does not convert to the parameter's type.
    """
    if not isinstance(line, str):
        raise TypeError("parse() first argument must be a string")

    # A trailing space lets the last unquoted value find its delimiter.
    line += " "

    values = {}
    for parameter in parameters:
        values[parameter.name] = parameter.default

        if (raw := _extract(line, parameter)) is None:
            continue

        try:
            values[parameter.name] = convert(raw, parameter.type)
        except (ValueError, OverflowError) as exception:
            raise UnconvertibleValueError(
                f"cannot convert value for {parameter.name}",
                title="unconvertible value",
                code=FaultCode.UNCONVERTIBLE_VALUE,
                hint="%r is not a valid %s" % (raw, parameter.type.__name__),
                parameter=parameter,
                input=line.rstrip(" "),
                value=raw,
            ) from exception

    return ParsedArguments(values)


__all__ = (
    "ParsedArguments",
    "parse",
)
