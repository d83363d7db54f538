"""
Argbind parser engine: register parameters, parse argument vectors, render help.

What this module provides
- Parser: the registry of named and positional parameters plus:
  • Registration-time validation (name shapes, uniqueness, positional ordering).
  • A single-pass, left-to-right parse over argv that dispatches each token to
    its parameter for conversion, then checks requiredness.
  • Help/usage rendering (Rich Text, color-aware, wrapped at 80 columns).

- invoke(parser, argv): convenience runner for shell programs; prints the usage
  and the fault to stderr and exits with status 1 when parsing fails.

Token grammar
    value            positional value (also "-" alone)
    -x               short option x (flag, or the next token is its value)
    --name           long option (flag, or the next token is its value)
    --name=value     long option with inline value

Quick start
    from argbind import Parser, invoke

    parser = Parser("Copy files around.")
    verbose = parser.add_flag("verbose", "v", descr="Print every copied file")
    level = parser.add_named("level", "l", type=int, default=1, required=False)
    sources = parser.add_positional("sources", multiple=True)

    if __name__ == "__main__":
        invoke(parser)
        print(verbose.value, level.value, sources.value)

Design notes
- Every failure is one exception (see argbind.faults) raised at the first violation.
- Values converted before a failing token stay written (no rollback).
- parse() resets every parameter on entry, so one parser can parse many times.
"""
import difflib
import functools
import os
import sys
from collections import defaultdict, deque
from types import MappingProxyType

from rich.console import Console
from rich.containers import Lines
from rich.text import Text

from .faults import *
from .parameters import *
from .utils import *

# Usage lines never grow past this column.
WIDTH = 80

# Rich styles by help role; __styles__ in __main__ overrides entries.
_palette = {
    "usage-label": "bold #00E6FF",
    "program-name": "bold #FF4D94",
    "description-section": "italic #A3A3A3",
    "group-label": "bold #FFFFFF",
    "argument-description": "#9CA3AF",
    "option-name": "bold #00E6FF",
    "flag-name": "bold #22C55E",
    "metavar": "bold #FFD600",
    "choice": "bold #FF4D94",
}

_words = ("first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth", "tenth")


@functools.cache
def _ordinal(number):
    """
    Spell a 1-based token position: "first" up to "tenth", then "11th", "21st", "112th"...
    """
    if 1 <= number <= len(_words):
        return _words[number - 1]
    if number % 100 in (11, 12, 13):
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return "%d%s" % (number, suffix)


class Parser:
    """
    Registry of parameters and the parse/validate/render engine over it.

    Collections
    - named: long name → parameter, in registration order (plus a short-name index).
    - positionals: parameters in positional order; index n is parameter #n+1.

    Lifecycle
    - Register every parameter first (add_named/add_flag/add_positional/register).
    - parse(argv) as many times as needed; each call starts from a clean parse state.
    - Render help at any time; prog comes from the last parsed argv[0].

    Parameters
    - description: Unset | str
      Text printed on top of the help.
    - colorful: bool
      Style help and fault renders (Rich styles, overridable via __styles__ in __main__).
    - fancy: bool
      Render faults inside a panel.
    """

    def __init__(self, description=Unset, /, *, colorful=True, fancy=False):
        if not isinstance(description, str | Unset):
            raise TypeError("parser 'description' must be a string")
        self._description = coalesce(description, "").strip()
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._named = {}
        self._shorts = {}
        self._positionals = []
        self._prog = Unset

        # per-parse state
        self._index = 0
        self._cursor = 0
        self._pending = None

    @property
    def description(self):
        return self._description

    @property
    def colorful(self):
        return self._colorful

    @property
    def fancy(self):
        return self._fancy

    @property
    def named(self):
        return MappingProxyType(self._named)

    @property
    def positionals(self):
        return tuple(self._positionals)

    @property
    def prog(self):
        """
        Display name of the program: __prog__ from __main__ when defined, else the
        base name of the last parsed argv[0], else the base name of sys.argv[0].
        """
        main = __import__("__main__")
        if hasattr(main, "__prog__"):
            return str(main.__prog__)
        if self._prog is not Unset:
            return self._prog
        return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "prog"

    def __getitem__(self, name):
        return self._named[name]

    def __contains__(self, name):
        return name in self._named

    def __iter__(self):
        yield from self._named.values()
        yield from self._positionals

    def __len__(self):
        return len(self._named) + len(self._positionals)

    def __repr__(self):
        return "parser(description=%r, named=%r, positionals=%r)" % (
            self._description, tuple(self._named), tuple(parameter.name for parameter in self._positionals)
        )

    # --- registration ---

    def add_named(
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
        """
        Register a named parameter (--name value, --name=value, -s value).

        Returns the registered Named handle; its .value holds the bound value.
        """
        return self.register(Named(
            name,
            short,
            type=type,
            default=default,
            choices=choices,
            descr=descr,
            required=required,
            multiple=multiple,
        ))

    def add_flag(self, name, short=Unset, /, descr=Unset):
        """
        Register a boolean switch (--name, -s). Its .value becomes True when seen.
        """
        return self.register(Flag(name, short, descr=descr))

    def add_positional(
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
        """
        Register the next positional parameter; name is used for display only.
        """
        return self.register(Positional(
            name,
            type=type,
            default=default,
            choices=choices,
            descr=descr,
            required=required,
            multiple=multiple,
        ))

    def register(self, parameter, /):
        """
        Register a prebuilt parameter and return it.

        errors
        - TypeError when the object is not a parameter or already belongs to a parser.
        - RegistrationError subclasses for registry rule violations; the registry
          is left untouched when one is raised.
        """
        if not isinstance(parameter, Parameter):
            raise TypeError("register() argument must be a parameter")
        if parameter._owner is not Unset:
            raise TypeError("%s is already registered" % type(parameter).__typename__)
        if parameter.positional:
            self._register_positional(parameter)
        else:
            self._register_named(parameter)
        parameter._owner = self
        return parameter

    def _register_named(self, parameter):
        name = parameter.name
        short = parameter.short

        if len(name) < 2:
            raise TooShortNameError(
                "long name %r of %s is too short" % (name, parameter.label),
                title="too short name",
                code=FaultCode.TOO_SHORT_NAME,
                hint="use at least two characters; single characters are short names (for example: add_named(%r, %r))" % (name * 2, name),
                parameter=parameter,
            )

        if name.startswith("-") or "=" in name or any(char.isspace() for char in name):
            raise BadLongNameError(
                "long name %r cannot start with '-' or contain '=' or spaces" % name,
                title="bad long name",
                code=FaultCode.BAD_LONG_NAME,
                hint="register the bare name; the '--' prefix is added by the parser",
                parameter=parameter,
            )

        if short is not None and not (len(short) == 1 and "!" <= short <= "~"):
            raise BadShortNameError(
                "bad short name %r for parameter --%s" % (short, name),
                title="bad short name",
                code=FaultCode.BAD_SHORT_NAME,
                hint="use one printable ascii character other than space",
                parameter=parameter,
            )

        if name in self._named:
            raise DuplicateLongNameError(
                "repeated parameter long name: %s" % parameter.label,
                title="duplicate long name",
                code=FaultCode.DUPLICATE_LONG_NAME,
                hint="pick another long name; %s is already registered" % self._named[name].label,
                parameter=parameter,
            )

        if short is not None and short in self._shorts:
            raise DuplicateShortNameError(
                "repeated parameter short name: %s" % parameter.label,
                title="duplicate short name",
                code=FaultCode.DUPLICATE_SHORT_NAME,
                hint="pick another short name; %s already uses '-%s'" % (self._shorts[short].label, short),
                parameter=parameter,
            )

        self._named[name] = parameter
        if short is not None:
            self._shorts[short] = parameter

    def _register_positional(self, parameter):
        index = len(self._positionals) + 1

        for previous in self._positionals:
            if previous.multiple:
                raise BadPositionalOrderingError(
                    "positional list parameter %s followed by another positional parameter #%d <%s>" % (
                        previous.label, index, parameter.name
                    ),
                    title="bad positional ordering",
                    code=FaultCode.BAD_POSITIONAL_ORDERING,
                    hint="a list positional absorbs every remaining value; register it last",
                    parameter=parameter,
                )
            if not previous.required and parameter.required:
                raise BadPositionalOrderingError(
                    "optional positional parameter %s followed by required positional parameter #%d <%s>" % (
                        previous.label, index, parameter.name
                    ),
                    title="bad positional ordering",
                    code=FaultCode.BAD_POSITIONAL_ORDERING,
                    hint="register required positionals before optional ones",
                    parameter=parameter,
                )

        parameter._index = index
        self._positionals.append(parameter)

    # --- parsing ---

    def parse(self, argv=Unset, /):
        """
        parse an argv-like sequence into the registered parameters.

        phases
        - setup
          • argv[0] is the program path; its base name becomes prog.
          • every parameter is reset (parse state cleared, lists restored).
        - loop, one token at a time (1-based positions in messages)
          • pending named value → the token is its value, whatever it looks like.
          • bare token ("value", "-") → next positional.
          • "-x" → short option; "--name" → long option; "--name=value" → inline value.
          • anything else starting with "-" → malformed option.
        - post-parse
          • a named option still waiting for its value → MissingArgumentError.
          • required named parameters not seen → MissingArgumentError.
          • required positionals not seen → MissingPositionalError.

        errors
        - TypeError when argv holds a non-string token, ValueError when argv is empty.
        - ParseError subclasses (see argbind.faults) at the first offending token.
        """
        argv = list(coalesce(argv, sys.argv))
        if not argv:
            raise ValueError("parse() argument must contain at least the program name")
        for position, token in enumerate(argv):
            if not isinstance(token, str):
                raise TypeError("parse() argument #%d must be a string, not %s" % (position, type(token).__name__))

        self._prog = os.path.basename(argv[0]) or argv[0]

        for parameter in self:
            parameter.reset()

        self._index = 0
        self._cursor = 0
        self._pending = None

        for self._index, token in enumerate(argv[1:], 1):
            if self._pending is not None:
                parameter, self._pending = self._pending, None
                self._convert(parameter, token)
            elif len(token) < 2 or not token.startswith("-"):
                self._parse_positional(token)
            elif len(token) == 2:
                self._parse_short(token)
            elif token.startswith("--"):
                self._parse_long(token)
            else:
                raise BadArgumentError(
                    "bad form of option %r at %s position" % (token, _ordinal(self._index)),
                    title="malformed option",
                    code=FaultCode.BAD_ARGUMENT,
                    hint="short options take one character (-x) and long options two dashes (--name)",
                    token=token,
                    index=self._index,
                    docs=getdoc(FaultCode.BAD_ARGUMENT),
                )

        self._finalize()

    def _parse_positional(self, token):
        try:
            parameter = self._positionals[self._cursor]
        except IndexError:
            raise UnexpectedArgumentError(
                "unexpected argument %r at %s position" % (token, _ordinal(self._index)),
                title="unexpected argument",
                code=FaultCode.UNEXPECTED_ARGUMENT,
                hint=("this program takes no positional arguments" if not self._positionals else
                      "this program takes at most %d positional argument(s)" % len(self._positionals)),
                token=token,
                index=self._index,
                docs=getdoc(FaultCode.UNEXPECTED_ARGUMENT),
            ) from None

        self._convert(parameter, token)
        if not parameter.multiple:
            self._cursor += 1

    def _parse_short(self, token):
        try:
            parameter = self._shorts[token[1]]
        except KeyError:
            raise self._unknown(token, ("-" + short for short in self._shorts)) from None
        self._select(parameter, token)

    def _parse_long(self, token):
        name, separator, value = token[2:].partition("=")
        try:
            parameter = self._named[name]
        except KeyError:
            raise self._unknown("--" + name, ("--" + name for name in self._named)) from None

        if separator:
            self._guard(parameter, token)
            self._convert(parameter, value)
        else:
            self._select(parameter, token)

    def _select(self, parameter, token):
        # flags convert at once; value-bearing options wait for the next token
        self._guard(parameter, token)
        if parameter.flag:
            self._convert(parameter, "true")
        else:
            self._pending = parameter

    def _guard(self, parameter, token):
        if parameter.parsed and not parameter.repeatable:
            raise RepeatedArgumentError(
                "repeated argument %s at %s position" % (parameter.label, _ordinal(self._index)),
                title="repeated argument",
                code=FaultCode.REPEATED_ARGUMENT,
                hint="pass %s only once, or drop the extra %r" % (parameter.label, token),
                parameter=parameter,
                token=token,
                index=self._index,
                docs=getdoc(FaultCode.REPEATED_ARGUMENT),
            )

    def _convert(self, parameter, token):
        try:
            parameter.convert(token)
        except ValueError as exception:
            kind = "positional argument" if parameter.positional else "argument"
            message = "bad %s %s at %s position: %r" % (kind, parameter.label, _ordinal(self._index), token)
            valid = getattr(exception, "valid", None)
            if valid:
                message += ". valid values: %s" % valid
                hint = "use one of: %s" % valid
            else:
                hint = "check the value given to %s" % parameter.label
            raise BadArgumentError(
                message,
                title="bad argument",
                code=FaultCode.BAD_ARGUMENT,
                hint=hint,
                parameter=parameter,
                token=token,
                index=self._index,
                valid=valid,
                docs=getdoc(FaultCode.BAD_ARGUMENT),
            ) from exception

    def _unknown(self, input, candidates):
        suggestions = difflib.get_close_matches(input, list(candidates), 5)
        try:
            hint = "did you mean %r? you can also run '%s --help' to see all options" % (suggestions[0], self.prog)
        except IndexError:
            hint = "try '%s --help' to see all available options" % self.prog
        return UnexpectedArgumentError(
            "unexpected argument %r at %s position" % (input, _ordinal(self._index)),
            title="unknown option",
            code=FaultCode.UNEXPECTED_ARGUMENT,
            hint=hint,
            token=input,
            index=self._index,
            suggestions=suggestions,
            docs=getdoc(FaultCode.UNEXPECTED_ARGUMENT),
        )

    def _finalize(self):
        if (parameter := self._pending) is not None:
            self._pending = None
            raise MissingArgumentError(
                "missing value for argument %s after %s position" % (parameter.label, _ordinal(self._index)),
                title="missing value",
                code=FaultCode.MISSING_ARGUMENT,
                hint="pass a value after it (for example: --%s <%s> or --%s=<%s>)" % ((parameter.name,) * 4),
                parameter=parameter,
                index=self._index,
                docs=getdoc(FaultCode.MISSING_ARGUMENT),
            )

        for parameter in self._named.values():
            if parameter.required and not parameter.parsed:
                raise MissingArgumentError(
                    "missing argument: %s" % parameter.label,
                    title="missing argument",
                    code=FaultCode.MISSING_ARGUMENT,
                    hint="pass it as --%s <%s>" % (parameter.name, parameter.name),
                    parameter=parameter,
                    docs=getdoc(FaultCode.MISSING_ARGUMENT),
                )

        for parameter in self._positionals:
            if parameter.required and not parameter.parsed:
                raise MissingPositionalError(
                    "missing %s positional argument %s" % (_ordinal(parameter.index), parameter.label),
                    title="missing positional argument",
                    code=FaultCode.MISSING_POSITIONAL,
                    hint="pass <%s> as the %s bare value" % (parameter.name, _ordinal(parameter.index)),
                    parameter=parameter,
                    index=parameter.index,
                    docs=getdoc(FaultCode.MISSING_POSITIONAL),
                )

    # --- rendering ---

    def _styler(self):
        styles = defaultdict(str, _palette | getattr(__import__("__main__"), "__styles__", {}))

        def styler(role):
            return styles[role] if self._colorful else ""

        return styler

    def _names(self, parameter, styler, *, usage):
        style = styler("flag-name" if parameter.flag else "option-name")
        metavar = Text.assemble(" ", ("<%s>" % parameter.name, styler("metavar")))
        long = Text("--" + parameter.name, style)
        if not parameter.flag:
            long.append_text(metavar)
        if parameter.short is None:
            return long
        short = Text("-" + parameter.short, style)
        if usage:
            if not parameter.flag:
                short.append_text(metavar)
            return Text.assemble(short, " | ", long)
        return Text.assemble(short, ", ", long)

    def format_description(self):
        """
        Render the program description (empty Text when there is none).
        """
        return Text(self._description, self._styler()("description-section"))

    def format_usage(self):
        """
        Render the usage synopsis, wrapped at 80 columns between whole parameters.

        - named parameters first (registration order): [optional], (required with
          short name), "-s <name> | --name <name>", flags without "<name>", lists with "...".
        - positionals next: <name>, [<name>], "<name> ...".
        """
        styler = self._styler()
        usage = Text()
        usage.append("Usage", styler("usage-label")).append(": ")
        usage.append(self.prog, styler("program-name"))

        offset = len(usage) + 1  # Hanging-indent column for wrapped usage items
        inputs = deque()

        for parameter in self._named.values():
            item = self._names(parameter, styler, usage=True)
            if parameter.multiple:
                item.append(" ...")
            if not parameter.required:
                item = Text.assemble("[", item, "]")
            elif parameter.short is not None:
                item = Text.assemble("(", item, ")")
            inputs.append(item)

        for parameter in self._positionals:
            item = Text("<%s>" % parameter.name, styler("metavar"))
            if parameter.multiple:
                item.append(" ...")
            if not parameter.required:
                item = Text.assemble("[", item, "]")
            inputs.append(item)

        try:
            lines = Lines([inputs.popleft()])
        except IndexError:
            return usage

        while inputs:
            if len(lines[-1]) + 1 + len(input := inputs.popleft()) > WIDTH - offset:
                lines.append(input)
            else:
                lines[-1].append_text(Text(" ") + input)

        usage.append(" ").append_text(lines.pop(0))
        for line in lines:
            usage.append("\n").append(" " * offset).append_text(line)
        return usage

    def format_parameters(self):
        """
        Render the "Options:" table: one row per parameter, help text aligned on the
        longest label, plus "Valid values: ..." for enumerations.
        """
        styler = self._styler()
        parameters = list(self)
        if not parameters:
            return Text()

        padding = 4  # Leading spaces before the label column
        labels = []
        for parameter in parameters:
            if parameter.positional:
                labels.append(Text("<%s>" % parameter.name, styler("metavar")))
            else:
                labels.append(self._names(parameter, styler, usage=False))
        indent = padding + max(map(len, labels)) + 1

        console = Console(width=WIDTH)
        table = Text()
        table.append("Options", styler("group-label")).append(":")

        for parameter, label in zip(parameters, labels):
            section = Text(" " * padding).append_text(label)

            descr = Text()
            if parameter.descr:
                descr.append_text(Text(str(parameter.descr), styler("argument-description")))
            if valid := parameter.valid:
                if descr:
                    descr.append(". ")
                descr.append("Valid values: ").append(valid, styler("choice"))

            if descr:
                section.append(" " * (indent - len(section)))
                wrapped = descr.wrap(console, max(WIDTH - indent, 20))
                for line in wrapped:
                    line.rstrip()
                section.append_text(wrapped[0])
                for line in wrapped[1:]:
                    section.append("\n").append(" " * indent).append_text(line)

            table.append("\n").append_text(section)
        return table

    def format_help(self):
        """
        Render the full help: description, usage and the parameter table.
        """
        sections = [self.format_description(), self.format_usage(), self.format_parameters()]
        return Text("\n\n").join(section for section in sections if section)

    def print_help(self, console=Unset, /):
        coalesce(console, Console()).print(self.format_help(), soft_wrap=True)

    def print_usage(self, console=Unset, /):
        coalesce(console, Console()).print(self.format_usage(), soft_wrap=True)


def invoke(parser, argv=Unset, /, *, shell=True):
    """
    Run parser.parse(argv) the way a command-line program wants it.

    - shell=True: on a fault, print the usage and the fault to stderr (Rich) and exit(1).
    - shell=False: the fault is raised, carrying the parser's rendering options.

    Returns the parser, so values can be read right away.
    """
    if not isinstance(parser, Parser):
        raise TypeError("invoke() argument must be a parser")
    try:
        parser.parse(argv)
    except ParserException as fault:
        if shell:
            parser.print_usage(Console(stderr=True))
        trigger(fault, tool=parser, shell=shell, fancy=parser.fancy, colorful=parser.colorful)
    return parser


__all__ = (
    "Parser",
    "invoke",
)
