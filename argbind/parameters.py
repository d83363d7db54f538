r"""
Argbind parameter model.

Overview
- Parameter: one registered, bindable destination. It knows its identity, its
  cardinality and requiredness, and how to consume one textual token into its
  bound value through a Converter.
  • Named[_T]: addressed by --name, -s, or --name=value.
  • Flag: a Named boolean switch that never consumes a following token.
  • Positional[_T]: addressed by its position among bare (non-option) tokens.

- Introspection
  • ParameterType (metaclass) derives __typename__, __repr__ and __rich_repr__, and
    publishes the __introspectable__ fields as read-only properties.

Metadata (sanitized on construction)
- name: str (long name for named parameters, display name for positionals), non-blank.
- short: Unset | str (named only); its shape is validated at registration time.
- descr: Unset | str | Text (help text), non-empty when provided.
- type / choices: drive the converter (see converters.converter); never both.
- default: initial bound value (an iterable for list parameters).
- required / multiple: requiredness and SCALAR vs LIST kind.

Parse state
- parsed: set by convert(), cleared by reset() at the start of every parse call.
- value: bound value. List parameters restart from their default at reset, and the
  first conversion after a reset replaces that default, so repeated parse calls
  never accumulate.

Quick example:
    >>> from argbind.parameters import Named, Flag, Positional
    >>> level = Named("level", "l", type=int, default=1, required=False)
    >>> level.convert("3")
    3
    >>> level.value
    3
"""
import builtins
import re
from collections.abc import Iterable

from rich.text import Text

from .converters import *
from .utils import *


class ParameterType(type):
    """
    Metaclass of every parameter class.

    On class creation it adds:
    - __typename__: the class name in kebab case ("Named" -> "named"), used in faults.
    - one read-only property (utils.mirror) per name in __introspectable__.
    - __repr__ and __rich_repr__ over __displayable__ (or __introspectable__ when unset).
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            typename(field=value, ...) over the displayable fields.

            Example
            - named(name='level', short='l', descr=None, required=False, multiple=False, value=1)
            """
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join("%s=%r" % pair for pair in self.__rich_repr__())
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate shared parameter metadata ('name', 'descr').

    Raises
    - TypeError: if 'name' is not a string, or 'descr' is not a string/Text/Unset.
    - ValueError: if 'name' or 'descr' is blank.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not name.strip():
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: normalize the short name of named parameters.

    Only the type is checked here; whether the short name is a single printable
    character is a registry rule (BadShortNameError from Parser.register).
    """
    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    metadata["short"] = coalesce(short)


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: validate value-bearing metadata and build the converter.

    Responsibilities
    - type/choices: converted into a Converter (TypeError when both are given).
    - multiple: list parameters need an iterable default (strings are rejected),
      materialized into a list; an omitted default becomes [].
    - default: scalar parameters default to None when omitted.
    """
    metadata["converter"] = converter(metadata.pop("type"), metadata.pop("choices"))

    default = metadata["default"]
    if metadata["multiple"]:
        if default is Unset:
            default = []
        elif not isinstance(default, Iterable) or isinstance(default, str):
            raise TypeError(f"list {cls.__typename__} 'default' must be an iterable")
        metadata["default"] = list(default)
    else:
        metadata["default"] = coalesce(default)


class Parameter(metaclass=ParameterType):
    """
    Base of every registered parameter (see Named, Flag and Positional).

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes
      on instances, mirroring the sanitized metadata and the current parse state.
    """

    __introspectable__ = (
        "name",
        "descr",
        "required",
        "multiple",
        "flag",
        "index",
        "converter",
        "parsed",
    )

    __displayable__ = (
        "name",
        "descr",
        "required",
        "multiple",
        "value",
    )

    def _build(self, metadata, /):
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._flag = False
        self._index = 0
        self._owner = Unset  # Claimed by Parser.register().
        self._value = self._replica()
        self._parsed = False

    def _replica(self):
        return list(self._default) if self._multiple else self._default

    @property
    def default(self):
        return self._replica()

    @property
    def value(self):
        """
        Bound value: the converted object itself for scalars, a fresh list of the
        converted objects for list parameters.
        """
        return list(self._value) if self._multiple else self._value

    @property
    def choices(self):
        """
        Read-only literal → value mapping for enumerated parameters, otherwise None.
        """
        return getattr(self._converter, "values", None)

    @property
    def valid(self):
        """
        Comma-separated valid literals (enumerations), otherwise None.
        """
        return self._converter.describe()

    @property
    def positional(self):
        return False

    @property
    def repeatable(self):
        """
        Whether the parameter may be matched more than once within one parse call.
        """
        return self._multiple or self._flag

    @property
    def label(self):
        return self._name

    def convert(self, token, /):
        """
        Convert one token and store it into the bound value.

        - scalar: the value is replaced.
        - list: the first conversion after a reset clears the list, later ones append.

        Raises ConversionError (a ValueError) when the token has no valid value;
        the bound value is left untouched in that case.
        """
        value = self._converter.convert(token)
        if self._multiple:
            if not self._parsed:
                self._value = []
            self._value.append(value)
        else:
            self._value = value
        self._parsed = True
        return value

    def reset(self):
        """
        Forget the parse state. List parameters restart from their default;
        scalar bindings keep their last value.
        """
        self._parsed = False
        if self._multiple:
            self._value = self._replica()

    def __str__(self):
        return self.label


class Named[_T](Parameter):
    """
    Named, value-bearing parameter (--name value, --name=value, -s value).

    Parameters
    - name: str
      Long name, matched after the "--" prefix. At least two characters (checked
      at registration).
    - short: Unset | str
      Optional single-character alias matched after "-".
    - type: Unset | Callable
      Scalar type (str when omitted); see converters.ScalarConverter.
    - default: Any
      Initial bound value; left in place when the parameter is not supplied.
    - choices: Unset | Mapping[str, _T] | type[Enum] | Iterable[str]
      Enumerated literals; cannot be combined with 'type'.
    - descr: Unset | str
      Help text.
    - required: bool
      Parsing fails with MissingArgumentError when a required parameter is absent.
    - multiple: bool
      List parameter: accepts repeated occurrences, accumulating values in order.
    """

    __introspectable__ = Parameter.__introspectable__ + ("short",)
    __displayable__ = ("name", "short") + Parameter.__displayable__[1:]

    def __init__(
            self,
            name,
            short=Unset,
            /,
            type=Unset,
            default=Unset,
            choices=Unset,
            descr=Unset,
            *,
            required=True,
            multiple=False
    ):
        metadata = {
            "name": name,
            "short": short,
            "type": type,
            "default": default,
            "choices": choices,
            "descr": descr,
            "required": bool(required),
            "multiple": bool(multiple),
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_named_metadata(builtins.type(self), metadata)
        _sanitize_parametric_metadata(builtins.type(self), metadata)
        self._build(metadata)

    @property
    def label(self):
        if self._short is not None:
            return "-%s/--%s" % (self._short, self._name)
        return "--%s" % self._name


class Flag(Named[bool]):
    """
    Named, presence-only boolean switch (--verbose, -v).

    A flag is always optional, never a list, and may appear several times. The
    parser converts the synthetic token "true" when the switch is seen; the
    --name=value form converts its value through the boolean converter.
    """

    def __init__(self, name, short=Unset, /, descr=Unset):
        super().__init__(name, short, type=bool, default=False, descr=descr, required=False)
        self._flag = True


class Positional[_T](Parameter):
    """
    Positional, value-bearing parameter addressed by its position among bare tokens.

    Parameters
    - name: str
      Display name used in usage/help and messages.
    - type, default, choices, descr, required, multiple
      Same meaning as for Named. A list positional absorbs every remaining bare
      token, so it must be the last positional of a parser.
    """

    def __init__(
            self,
            name,
            /,
            type=Unset,
            default=Unset,
            choices=Unset,
            descr=Unset,
            *,
            required=True,
            multiple=False
    ):
        if isinstance(self, Flag):
            raise TypeError(f"{builtins.type(self).__typename__} cannot be a flag")
        metadata = {
            "name": name,
            "type": type,
            "default": default,
            "choices": choices,
            "descr": descr,
            "required": bool(required),
            "multiple": bool(multiple),
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_parametric_metadata(builtins.type(self), metadata)
        self._build(metadata)

    @property
    def positional(self):
        return True

    @property
    def label(self):
        return "#%d <%s>" % (self._index, self._name)


__all__ = (
    "Parameter",
    "Named",
    "Flag",
    "Positional",
)

del ParameterType
