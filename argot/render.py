"""
Argot presentation layer: help, usage and version text.

The parser hands structured data (program name, version triple, description,
schema) to these renderers and prints what they return. Every renderer returns
a rich Text, so callers may print it on any Console or read its .plain form.

Help layout
    NAME MAJOR.MINOR.PATCH

    DESCRIPTION

    USAGE
        NAME [OPTION] POS1 POS2

    ARGUMENTS

        POS1
            description

    OPTIONS

        -s, --long <META> (default: a) (possible values: a, b) (required) (conflicting options: --x)
            description

        -h, --help
            Display this and exit

Palette keys
- program-name, version, section, usage
- option-name, metavar, positional, annotation, value, description

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When colorful is False, no style is applied at all.
"""
from collections import defaultdict

from rich.text import Text

from .schema import Arity
from .validator import HELP_FORMS

HELP_DESCRIPTION = "Display this and exit"

_STYLES = {
    # head
    "program-name": "bold green",
    "version": "bold blue",
    "section": "bold yellow",
    "usage": "",

    # entries
    "option-name": "bold green",
    "metavar": "bold green",
    "positional": "bold green",
    "annotation": "green",
    "value": "bold blue",
    "description": "",
}


def _styler(colorful, /):
    styles = defaultdict(str, _STYLES | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    return styler


def _version(version, /):
    return ".".join(str(part) for part in version)


def render_version(parser, /):
    """
    Name and version line, e.g. "tool 1.2.3".
    """
    styler = _styler(parser.colorful)
    return Text.assemble(
        (parser.name, styler("program-name")),
        (" " + _version(parser.version), styler("version")),
    )


def render_usage(parser, /):
    """
    USAGE block: the section label and the synthesized usage line.
    """
    styler = _styler(parser.colorful)
    usage = Text()
    usage.append("USAGE", styler("section")).append("\n")
    usage.append("    %s [OPTION]" % parser.name, styler("usage"))
    for positional in parser.schema.positionals:
        usage.append(" " + positional.metavar, styler("usage"))
    return usage


def _names(option, /):
    separator = ", " if option.short is not None and option.long is not None else ""
    names = (option.short or "") + separator + (option.long or "")
    match option.arity:
        case Arity.NONE:
            return names
        case Arity.ONE:
            return names + " <%s>" % option.metavar
        case _:
            return names + " <%s...>" % option.metavar


def render_option(option, schema, /, *, colorful=False):
    """
    One OPTIONS entry: names line with annotations, then the indented description.
    """
    styler = _styler(colorful)
    line = Text("    ")
    line.append(_names(option), styler("option-name"))

    if option.default:
        line.append(" (default:", styler("annotation"))
        for value in option.default:
            line.append(" " + value, styler("value"))
        line.append(")", styler("annotation"))

    if option.choices:
        line.append(" (possible values:", styler("annotation"))
        for index, value in enumerate(option.choices):
            line.append(" " if index == 0 else ", ", styler("annotation"))
            line.append(value, styler("value"))
        line.append(")", styler("annotation"))

    if option.required:
        line.append(" (required)", styler("annotation"))

    if option.conflicts:
        line.append(" (conflicting options:", styler("annotation"))
        for index, name in enumerate(option.conflicts):
            line.append(" " if index == 0 else ", ", styler("annotation"))
            line.append(schema[name].label if name in schema else name, styler("value"))
        line.append(")", styler("annotation"))

    line.append("\n")
    if option.descr:
        line.append("        ").append(option.descr, styler("description")).append("\n")
    return line


def render_positional(positional, /, *, colorful=False):
    """
    One ARGUMENTS entry: metavar line, then the indented description.
    """
    styler = _styler(colorful)
    line = Text("    ")
    line.append(positional.metavar, styler("positional")).append("\n")
    if positional.descr:
        line.append("        ").append(positional.descr, styler("description")).append("\n")
    return line


def _render_help_option(styler, /):
    line = Text("    ")
    line.append(", ".join(HELP_FORMS), styler("option-name")).append("\n")
    line.append("        ").append(HELP_DESCRIPTION, styler("description")).append("\n")
    return line


def render_entries(parser, /):
    """
    ARGUMENTS block (only when positionals exist) and OPTIONS block, the
    built-in help entry always last.
    """
    colorful = parser.colorful
    styler = _styler(colorful)
    schema = parser.schema
    entries = Text()

    if schema.positionals:
        entries.append("ARGUMENTS", styler("section")).append("\n")
        for positional in schema.positionals:
            entries.append("\n").append(render_positional(positional, colorful=colorful))
        entries.append("\n")

    entries.append("OPTIONS", styler("section")).append("\n")
    for option in schema.options:
        entries.append("\n").append(render_option(option, schema, colorful=colorful))

    entries.append("\n").append(_render_help_option(styler))
    return entries


def render_help(parser, /):
    """
    Full help screen: version line, description, usage, arguments and options.
    """
    help = Text()
    help.append(render_version(parser)).append("\n\n")
    if parser.descr:
        help.append(parser.descr, _styler(parser.colorful)("description")).append("\n\n")
    help.append(render_usage(parser)).append("\n\n")
    help.append(render_entries(parser))
    help.rstrip()
    return help


__all__ = (
    "render_version",
    "render_usage",
    "render_option",
    "render_positional",
    "render_entries",
    "render_help",
)
