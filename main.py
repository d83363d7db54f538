import enum
import sys

from rich.pretty import pprint

from argbind import *


class Level(enum.Enum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2


parser = Parser("Binds every kind of parameter and dumps the parsed values.")

show_help = parser.add_flag("help", "h", descr="Print this help and exit")
flag = parser.add_flag("flag", "f", descr="Flag")
string = parser.add_named("string", descr="String")
integer = parser.add_named("integer", type=int, descr="Integer")
enumeration = parser.add_named("enum", choices={"medium": Level.MEDIUM, "high": Level.HIGH}, default=Level.LOW,
                               descr="Enumeration")
optional_string = parser.add_named("optString", default="", descr="Optional string", required=False)
optional_integer = parser.add_named("optInteger", type=int, default=0, descr="Optional integer", required=False)
optional_enumeration = parser.add_named("optEnum", choices=Level, default=Level.LOW, descr="Optional enumeration",
                                        required=False)
strings = parser.add_named("strings", "s", descr="Strings", multiple=True)
integers = parser.add_named("integers", "i", type=int, descr="Integers", multiple=True)
enumerations = parser.add_named("enums", "e", choices=Level, descr="Enumerations", multiple=True)
optional_strings = parser.add_named("optStrings", descr="Optional strings", required=False, multiple=True)
optional_integers = parser.add_named("optIntegers", type=int, descr="Optional integers", required=False, multiple=True)
positional_string = parser.add_positional("string", descr="Positional string")
positional_integer = parser.add_positional("integer", type=int, default=0, descr="Positional integer")
positional_enumerations = parser.add_positional("enums", choices=Level, descr="Positional enumerations",
                                                required=False, multiple=True)


if __name__ == '__main__':
    # only a leading -h/--help skips the required-parameter checks
    if sys.argv[1:2] in (["-h"], ["--help"]):
        parser.print_help()
        sys.exit(0)

    invoke(parser)
    if show_help.value:
        parser.print_help()
        sys.exit(0)
    pprint({parameter.label: parameter.value for parameter in parser})
