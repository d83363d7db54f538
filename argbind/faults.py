"""
Argbind faults.

Every problem argbind reports is one exception carrying a lowercased message
and a read-only `options` mapping:

- code: FaultCode of the problem (stable, searchable).
- title / hint: short heading and one actionable suggestion for the user.
- context keys set by the parser where they apply: parameter, token, index,
  suggestions, valid, docs.
- rendering keys merged by trigger(): tool, shell, fancy, colorful.

Two families:
- RegistrationError: the program registered parameters in a way the registry
  refuses (raised by Parser.add_* / Parser.register).
- ParseError: the command line does not fit the registry (raised by Parser.parse).

The host program can tune reports from its __main__ module:
__styles__ (Rich styles by role), __codes__ (labels for codes), __docs__ (longer
texts per code, see getdoc) and __prog__ (program name in headers).
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    numeric identifiers of every fault; 211xx registration, 221xx parsing.
    """
    DUPLICATE_LONG_NAME         = 21101
    DUPLICATE_SHORT_NAME        = 21102
    TOO_SHORT_NAME              = 21103
    BAD_SHORT_NAME              = 21104
    BAD_LONG_NAME               = 21105
    BAD_POSITIONAL_ORDERING     = 21111

    UNEXPECTED_ARGUMENT         = 22101
    BAD_ARGUMENT                = 22102
    REPEATED_ARGUMENT           = 22103
    MISSING_ARGUMENT            = 22104
    MISSING_POSITIONAL          = 22121

    def normalize(self):
        """
        label of this code as shown to users: __codes__[self] from __main__ when the
        host defines it, the number otherwise.
        """
        labels = getattr(__import__("__main__"), "__codes__", {})
        return str(labels.get(self, self.value))


_palette = {
    "prog-name": "bold #E6E6F0",
    "code": "bold #00E5FF",
    "error-title": "bold #FF4DA6",
    "error-message": "#C8C8D0",
    "hint-arrow": "#9CE19C dim",
    "hint": "italic #9CE19C",
}


class ParserException(Exception):
    """
    base of every argbind fault; str() of a fault is its message.
    """

    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | Unset):
            raise TypeError("fault message must be a string")
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        styles = defaultdict(str, _palette | getattr(main, "__styles__", {}))

        def paint(content, role):
            return Text(str(content), styles[role] if colorful else "")

        if hasattr(main, "__prog__"):
            prog = main.__prog__
        elif "tool" in self.options:
            prog = self.options["tool"].prog
        else:
            prog = "argbind"

        code = self.code
        header = Text.assemble(
            "[ ",
            paint(prog, "prog-name"),
            " — ",
            paint(code.normalize() if code else "?", "code"),
            " | ",
            paint(self.options.get("title", "error").title(), "error-title"),
            " ]",
        )
        body = paint(coalesce(self.message, ""), "error-message")
        hint = Text.assemble(paint(" → ", "hint-arrow"), paint(self.options.get("hint", ""), "hint"))

        if self.options.get("fancy", False):
            return Panel(Group(body, hint), title=header, title_align="left")
        return Group(header, body, hint)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, **overrides):
        return type(self)(self.message, **(dict(self.options) | overrides))


class RegistrationError(ParserException): ...
class DuplicateLongNameError(RegistrationError): ...
class DuplicateShortNameError(RegistrationError): ...
class TooShortNameError(RegistrationError): ...
class BadShortNameError(RegistrationError): ...
class BadLongNameError(RegistrationError): ...
class BadPositionalOrderingError(RegistrationError): ...


class ParseError(ParserException): ...
class UnexpectedArgumentError(ParseError): ...
class BadArgumentError(ParseError): ...
class RepeatedArgumentError(ParseError): ...
class MissingArgumentError(ParseError): ...
class MissingPositionalError(ParseError): ...


def trigger(fault, /, **options):
    """
    surface a fault: copy.replace() merges the options in, then the copy's
    __trigger__ runs. with shell=True it is printed to stderr and the process
    exits with status 1; otherwise the copy is raised.
    """
    for hook in ("__trigger__", "__replace__"):
        if not callable(getattr(fault, hook, None)):
            raise TypeError("trigger() argument must define %s()" % hook)
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    longer documentation for a code, from the __docs__ mapping of __main__ (None if absent).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "ParserException",
    "RegistrationError",
    "DuplicateLongNameError",
    "DuplicateShortNameError",
    "TooShortNameError",
    "BadShortNameError",
    "BadLongNameError",
    "BadPositionalOrderingError",
    "ParseError",
    "UnexpectedArgumentError",
    "BadArgumentError",
    "RepeatedArgumentError",
    "MissingArgumentError",
    "MissingPositionalError",
    "FaultCode",
    "trigger",
    "getdoc",
)
