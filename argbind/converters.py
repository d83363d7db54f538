"""
Argbind value converters.

Overview
- Converter: capability turning one textual token into a bound value.
  • convert(token) -> value, raising ConversionError on bad input.
  • describe() -> str | None, the literal listing shown in help and errors.
- ScalarConverter[_T]: canonical textual parsing for scalar types.
  • str   → the token verbatim (embedded spaces are kept).
  • int   → strict base-10, optionally signed ("-10", "+3"; no "0x", "1_0" or spaces).
  • float → decimal or scientific notation ("1.5", "-.5", "2e10"; no "1_0", "inf" or spaces).
  • bool  → 1/0, true/false, yes/no, on/off (case-insensitive).
  • any other callable → called with the token; ValueError/TypeError become ConversionError.
- EnumConverter[_T]: case-sensitive lookup in an ordered literal → value mapping.

Choices normalization (see choices())
- Mapping[str, T]       → used as-is (order preserved).
- enum.Enum subclass    → {member.name: member}.
- Iterable[str]         → each literal maps to itself; duplicates rejected.
"""
import enum
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .utils import *


class ConversionError(ValueError):
    """
    raised by a converter when a token has no valid value.

    the engine wraps it into a BadArgumentError naming the parameter; `valid`
    carries the literal listing for enumerations (None otherwise).
    """

    def __init__(self, message, /, valid=None):
        super().__init__(message)
        self.message = message
        self.valid = valid


class Converter[_T](ABC):
    """
    Capability converting a single token into a value of type _T.
    """

    @abstractmethod
    def convert(self, token, /):
        ...

    def describe(self):
        """
        Return the valid-value listing, or None when any well-formed token is accepted.
        """
        return None

    def __call__(self, token, /):
        return self.convert(token)


def _integer(token):
    if not re.fullmatch(r"[+-]?[0-9]+", token):
        raise ValueError("invalid literal for int() with base 10: %r" % token)
    return int(token, 10)


def _real(token):
    if not re.fullmatch(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?", token):
        raise ValueError("could not convert string to float: %r" % token)
    return float(token)


def _boolean(token):
    try:
        return {
            "1": True, "true": True, "yes": True, "on": True,
            "0": False, "false": False, "no": False, "off": False,
        }[token.lower()]
    except KeyError:
        raise ValueError("invalid boolean literal: %r" % token) from None


_builtins = {
    str: str,
    int: _integer,
    float: _real,
    bool: _boolean,
}


class ScalarConverter[_T](Converter[_T]):
    """
    Converter for scalar types using their canonical textual representation.
    """

    def __init__(self, type=str, /):
        if not callable(type):
            raise TypeError("converter 'type' must be callable")
        self.type = type
        self._parse = _builtins.get(type, type)

    def convert(self, token, /):
        try:
            return self._parse(token)
        except (ValueError, TypeError) as exception:
            raise ConversionError("cannot convert %r to %s" % (token, getattr(self.type, "__name__", "value"))) from exception

    def __repr__(self):
        return "scalar-converter(type=%s)" % getattr(self.type, "__name__", repr(self.type))


class EnumConverter[_T](Converter[_T]):
    """
    Converter restricted to a fixed literal → value mapping (case-sensitive).
    """

    def __init__(self, values, /):
        self.values = choices(values)

    def convert(self, token, /):
        try:
            return self.values[token]
        except KeyError:
            raise ConversionError("%r is not a valid value" % token, valid=self.describe()) from None

    def describe(self):
        return ", ".join(self.values)

    def __repr__(self):
        return "enum-converter(values=%r)" % (tuple(self.values),)


def choices(values, /):
    """
    Normalize enumerated choices into a read-only, ordered literal → value mapping.

    Errors
    - TypeError when the choices are not a mapping/enum/iterable, or a literal is not a string.
    - ValueError when the choices are empty or contain duplicated literals.
    """
    if isinstance(values, type) and issubclass(values, enum.Enum):
        values = {member.name: member for member in values}
    elif isinstance(values, Mapping):
        values = dict(values)
    elif isinstance(values, Iterable) and not isinstance(values, str):
        sanitized = {}
        for value in values:
            if value in sanitized:
                raise ValueError("'choices' cannot contain duplicates")
            sanitized[value] = value
        values = sanitized
    else:
        raise TypeError("'choices' must be a mapping, an enumeration or an iterable")

    if not values:
        raise ValueError("'choices' cannot be empty")
    if not all(isinstance(literal, str) for literal in values):
        raise TypeError("'choices' literals must be strings")
    return MappingProxyType(values)


def converter(type=Unset, choices=Unset, /):
    """
    Build the converter for a parameter from its 'type' or 'choices'.

    Exactly one of them drives conversion: choices build an EnumConverter,
    otherwise a ScalarConverter over type (str when omitted).
    """
    if choices is not Unset:
        if type is not Unset:
            raise TypeError("parameter cannot have both 'type' and 'choices'")
        return EnumConverter(choices)
    return ScalarConverter(coalesce(type, str))


__all__ = (
    "ConversionError",
    "Converter",
    "ScalarConverter",
    "EnumConverter",
    "choices",
    "converter",
)
