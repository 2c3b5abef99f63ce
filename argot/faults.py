"""
Argot faults (errors, warnings, signals) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing parse issue.
- ParseError / ParseWarning: base types that carry message + options and know how
  to render themselves in a friendly, lowercased and actionable way.
- HelpRequested: control signal raised when the built-in help flag is scanned;
  it is not a failure and does not derive from ParseError.
- ViolationCode / SchemaViolation / SchemaError: build-time schema problems.
  These are programming errors and never reach the parsing engine.
- trigger(): central entry point to surface any fault (respecting shell/colorful/fancy).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: parse errors mention the ordinal position of the token
  they refer to ("at third position") whenever one exists.
- Soft but technical language: short titles, one-sentence bodies, a single hint.

Integration
- The parser builds a fault and calls trigger(fault, **context).
- A fault is always raised to the caller; in shell mode it is also rendered to
  the stderr console first. Process exit stays the caller's decision.
"""
import copy
import warnings
from abc import ABC
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
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - options (1111x)
      • MISSING_OPTION_ARGUMENT, INVALID_OPTION_ARGUMENT, REPEATED_OPTION,
        MISSING_REQUIRED_OPTION, CONFLICTING_OPTIONS
    - positionals (1112x)
      • MISSING_POSITIONAL
    - warnings (1211x)
      • UNPARSED_TOKENS
    - signals (1310x)
      • HELP_REQUESTED
    """
    # --- option errors (111xx) ---
    MISSING_OPTION_ARGUMENT     = 11111
    INVALID_OPTION_ARGUMENT     = 11112
    REPEATED_OPTION             = 11113
    MISSING_REQUIRED_OPTION     = 11114
    CONFLICTING_OPTIONS         = 11115

    # --- positional errors (112xx) ---
    MISSING_POSITIONAL          = 11121

    # --- warnings (12xxx) ---
    UNPARSED_TOKENS             = 12111

    # --- signals (13xxx) ---
    HELP_REQUESTED              = 13101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ViolationCode(IntEnum):
    """
    stable identifiers for schema violations (build-time, 21xxx).
    """
    # --- names (210xx) ---
    EMPTY_NAME                  = 21001
    BLANK_NAME                  = 21002
    ILLEGAL_NAME                = 21003
    DUPLICATED_NAME             = 21004

    # --- short/long forms (211xx) ---
    MISSING_NAMES               = 21101
    MALFORMED_NAME              = 21102
    RESERVED_NAME               = 21103
    DUPLICATED_FORM             = 21104
    SHADOWED_FORM               = 21105

    # --- arity and defaults (212xx) ---
    INVALID_ARITY               = 21201
    REQUIRED_WITH_DEFAULT       = 21202
    FLAG_WITH_DEFAULT           = 21203
    FLAG_WITH_CHOICES           = 21204
    DEFAULT_COUNT               = 21205
    DEFAULT_NOT_A_CHOICE        = 21206

    # --- possible values (213xx) ---
    EMPTY_CHOICE                = 21301
    BLANK_CHOICE                = 21302
    DUPLICATED_CHOICE           = 21303

    # --- conflicts (214xx) ---
    SELF_CONFLICT               = 21401
    UNKNOWN_CONFLICT            = 21402


_ERROR_STYLES = {
    # header parts
    "prog-name": "bold #E6E6F0",  # near-white program name
    "code": "bold #00E5FF",  # neon cyan fault code
    "title": "bold #FF4DA6",  # friendly pinky title

    # body
    "message": "#C8C8D0",  # soft light gray message
    "hint-arrow": "#9CE19C dim",  # gentle green arrow
    "hint": "italic #9CE19C",  # gentle green hint text
}

_WARNING_STYLES = _ERROR_STYLES | {
    "code": "bold #FFB400",  # amber fault code for warnings
    "title": "bold #FFC2E0",  # softer pinky title
    "message": "#D6D6DE",
}


def _render(fault, palette):
    """
    Build the rich renderable shared by errors and warnings.

    layout
    - header: [ prog — code | Title ]
    - message line
    - hint line introduced by an arrow
    the whole group is wrapped in a Panel when the 'fancy' option is set.
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", False)
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    prog = text(getattr(main, "__prog__", options.get("prog", "")), "prog-name")
    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(options["code"].normalize() if "code" in options else "", "code"),
        " | ",
        text(str(options.get("title", "")).title(), "title"),
        " ]"
    )
    message = text(fault.message, "message")
    hint = Text.assemble(text(" → ", "hint-arrow"), text(options.get("hint", ""), "hint"))

    if options.get("fancy", False):
        return Panel(Group(message, hint), title=header, title_align="left")
    return Group(header, message, hint)


class ParseError(Exception):
    """
    Base class of every parse-time failure.

    Attributes
    - message: one-sentence, lowercased description (position-first when a
      token position is known).
    - options: read-only mapping with at least 'code', 'title' and 'hint', plus
      contextual payload such as 'option', 'positional', 'value' or 'index'.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message else ""

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        return _render(self, _ERROR_STYLES)

    def __trigger__(self) -> None:
        if self.options.get("shell", False):
            self.options.get("console", console).print(self)
        raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MissingOptionArgumentError(ParseError): ...
class InvalidOptionArgumentError(ParseError): ...
class RepeatedOptionError(ParseError): ...
class MissingRequiredOptionError(ParseError): ...
class ConflictingOptionsError(ParseError): ...
class MissingPositionalError(ParseError): ...


class ParseWarning(ABC, Warning):
    """
    Base class of non-fatal parse feedback.

    Outside shell mode the warning goes through warnings.warn (so hosts can
    filter or record it); in shell mode it is printed on the stderr console.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message else ""

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        return _render(self, _WARNING_STYLES)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=self.options.get("stacklevel", 4))
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnparsedTokensWarning(ParseWarning): ...


class HelpRequested(Exception):
    """
    Control signal: the built-in help flag was scanned, parsing stopped.

    The rendered help travels with the signal (options["help"]) so callers that
    do not run in shell mode can print it themselves. In shell mode it is
    printed on the stdout console before the signal is raised.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message else ""

    @property
    def code(self):
        return FaultCode.HELP_REQUESTED

    @property
    def help(self):
        return self.options.get("help")

    def __rich__(self):
        return self.options.get("help") or Text("")

    def __trigger__(self) -> None:
        if self.options.get("shell", False):
            self.options.get("stdout", Console()).print(self)
        raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class SchemaViolation(ValueError):
    """
    A single schema rule broken by one entry.

    Attributes
    - code: ViolationCode identifying the rule.
    - entry: the offending Option/Positional (or None for schema-wide rules).
    """

    def __init__(self, code, message, /, entry=None):
        if not isinstance(code, ViolationCode):
            raise TypeError("SchemaViolation() first argument must be a violation-code")
        super().__init__(message)
        self.code = code
        self.message = message
        self.entry = entry

    def __reduce__(self):
        return type(self), (self.code, self.message, self.entry)


class SchemaError(ExceptionGroup[SchemaViolation]):
    """
    Raised by Schema construction when validation found any violation.
    """

    def __new__(cls, violations, /):
        return super().__new__(cls, "invalid schema", tuple(violations))

    def __init__(self, violations, /):
        super().__init__("invalid schema", tuple(violations))

    def derive(self, excs):
        return SchemaError(excs)

    @property
    def violations(self):
        return self.exceptions

    @property
    def codes(self):
        return frozenset(violation.code for violation in self.exceptions)


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace before triggering.
    - errors and signals are always raised; warnings are emitted.

    typical options
    - prog, shell, fancy, colorful, console, stdout, title, code, hint and any
      other context the renderer may want to show (option, value, index, ...).
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
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ViolationCode",
    "ParseError",
    "MissingOptionArgumentError",
    "InvalidOptionArgumentError",
    "RepeatedOptionError",
    "MissingRequiredOptionError",
    "ConflictingOptionsError",
    "MissingPositionalError",
    "ParseWarning",
    "UnparsedTokensWarning",
    "HelpRequested",
    "SchemaViolation",
    "SchemaError",
    "trigger",
    "getdoc",
)
