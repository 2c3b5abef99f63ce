"""
Argot parsing engine: turn a token list into the schema's result record.

What this module provides
- Parser: binds a validated Schema to program identity (name, description,
  version) and runtime policies, and parses token lists into a Namespace record.

Algorithm (one pass, no backtracking)
1. every field starts from its declared default or its zero value;
2. tokens are scanned left to right:
   • a help token stops everything and raises HelpRequested (help text attached,
     printed first in shell mode);
   • an option token (see argot.matcher for matching rules) stores its value(s)
     and claims the option; claiming twice is a RepeatedOptionError unless
     overwrite=True, in which case the later occurrence wins;
   • any other token is skipped for now;
   the cursor right after the last matched option is the positional boundary;
3. positionals take consecutive tokens from the boundary, in declaration order
   (MissingPositionalError names the first one left without a token);
4. required options must have been claimed (MissingRequiredOptionError);
5. two claimed options declared as conflicting fail (ConflictingOptionsError);
6. tokens consumed by nothing are reported with an UnparsedTokensWarning.

Runtime policies (keyword-only)
- shell: also render faults (stderr) and help (stdout) before raising them.
- colorful / fancy: styling of rendered text and fault panels.
- exact: exact instead of prefix matching of option and help forms.
- strict: refuse flag-looking tokens as option values.
- overwrite: later occurrences of an option replace earlier ones.

The parser never exits the process: failures are always raised as ParseError
subclasses and the help request as HelpRequested; deciding what to do with
them belongs to the caller.

Quick start
    from argot import Option, Positional, Schema, Parser

    parser = Parser(Schema(
        Option("verbose", "-v", "--verbose", descr="talk more"),
        Option("jobs", "-j", "--jobs", nargs=1, default="1", descr="worker count"),
        Positional("path", "PATH", descr="file to process"),
    ), name="tool", version=(1, 0, 0))

    namespace = parser(["-v", "--jobs", "4", "README.md"])
    # Namespace(verbose=True, jobs='4', path='README.md')
"""
import os.path
import shlex
import sys
from collections.abc import Iterable

from rich.console import Console

from .faults import *
from .matcher import Matcher
from .projector import initialize
from .render import render_help, render_usage, render_version
from .schema import Arity, Schema, SpecType
from .utils import *
from .validator import shadowed


def _sanitize_version(cls, version, /):
    """
    Internal: normalize a (major, minor, patch) triple of non-negative integers.
    """
    if isinstance(version, str) or not isinstance(version, Iterable):
        raise TypeError(f"{cls.__typename__} 'version' must be a (major, minor, patch) triple")
    version = tuple(version)
    if len(version) != 3 or not all(isinstance(part, int) and not isinstance(part, bool) for part in version):
        raise TypeError(f"{cls.__typename__} 'version' must be a (major, minor, patch) triple")
    if any(part < 0 for part in version):
        raise ValueError(f"{cls.__typename__} 'version' parts cannot be negative")
    return version


class Parser(metaclass=SpecType, sealed=True):
    """
    Schema-driven argument parser.

    Parameters
    - schema: Schema | Iterable[Option | Positional] (positional-only)
      Entries are wrapped into a Schema (and validated) when not one already.
    - name: Unset | str
      Program name for usage/help; defaults to the basename of sys.argv[0].
    - descr: Unset | str
      Description paragraph of the help screen.
    - version: (major, minor, patch)
      Version triple shown next to the program name.
    - shell, colorful, fancy, strict, exact, overwrite: bool (keyword-only)
      Runtime policies, see the module documentation.
    - stdout / stderr: Unset | rich.console.Console (keyword-only)
      Sinks for help and diagnostics in shell mode.

    Calling
    - parser.parse(prompt) or parser(prompt) where prompt is Unset (sys.argv[1:]),
      a shell-like string (shlex.split) or an iterable of strings.
    """

    __introspectable__ = (
        "schema",
        "name",
        "descr",
        "version",
        "shell",
        "colorful",
        "fancy",
        "strict",
        "exact",
        "overwrite",
    )
    __displayable__ = (
        "name",
        "version",
        "schema",
    )

    def __new__(
            cls,
            schema,
            /,
            name=Unset,
            descr=Unset,
            version=(0, 0, 0),
            *,
            shell=False,
            colorful=False,
            fancy=False,
            strict=False,
            exact=False,
            overwrite=False,
            stdout=Unset,
            stderr=Unset
    ):
        if not isinstance(schema, Schema):
            if isinstance(schema, str) or not isinstance(schema, Iterable):
                raise TypeError(f"{cls.__typename__} 'schema' must be a schema or an iterable of entries")
            schema = Schema(*schema)

        # Prefix matching: a form starting with an earlier option's form is dead.
        if not exact and (violations := shadowed(schema.options)):
            raise SchemaError(violations)

        name = coalesce(name, os.path.basename(sys.argv[0]) or "prog")
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} 'name' cannot be empty")

        if not isinstance(descr, str | Unset):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")
        elif isinstance(descr, str) and not (descr := descr.strip()):
            raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")

        for sink in (stdout, stderr):
            if not isinstance(sink, Console | Unset):
                raise TypeError(f"{cls.__typename__} 'stdout' and 'stderr' must be rich consoles")

        self = super().__new__(cls)
        self._schema = schema
        self._name = name
        self._descr = coalesce(descr)
        self._version = _sanitize_version(cls, version)
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._strict = bool(strict)
        self._exact = bool(exact)
        self._overwrite = bool(overwrite)
        self._stdout = coalesce(stdout, Console())
        self._stderr = coalesce(stderr, Console(stderr=True))
        self._matcher = Matcher(schema, exact=exact, strict=strict)
        return self

    @property
    def namespace(self):
        """
        Result record type of this parser (see argot.projector.project).
        """
        return self._schema.namespace

    def format_help(self):
        return render_help(self)

    def format_usage(self):
        return render_usage(self)

    def format_version(self):
        return render_version(self)

    def print_help(self, console=Unset, /):
        coalesce(console, self._stdout).print(self.format_help())

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's runtime context merged in.

        Errors and HelpRequested are always raised; warnings are emitted.
        """
        trigger(
            fault,
            **options,
            prog=self.name,
            shell=self.shell,
            fancy=self.fancy,
            colorful=self.colorful,
            console=self._stderr,
            stdout=self._stdout,
        )

    def _hint(self):
        return "run '%s --help' for more information" % self.name

    def _parseargs(self, tokens, /):
        values = initialize(self._schema)
        options = self._schema.options
        claimed = [False] * len(options)
        consumed = [False] * len(tokens)

        cursor = boundary = 0
        while cursor < len(tokens):
            token = tokens[cursor]

            if self._matcher.helps(token):
                self.trigger(HelpRequested(
                    "help requested at %s position" % ordinal(cursor + 1),
                    title="help requested",
                    code=FaultCode.HELP_REQUESTED,
                    index=cursor,
                    help=self.format_help(),
                ))

            if (found := self._matcher.find(token)) is None:
                cursor += 1
                continue

            index, option = found
            if claimed[index] and not self.overwrite:
                self.trigger(RepeatedOptionError(
                    "option %r at %s position appears more than one time" % (option.label, ordinal(cursor + 1)),
                    title="repeated option",
                    code=FaultCode.REPEATED_OPTION,
                    hint="keep a single %r; %s" % (option.label, self._hint()),
                    option=option,
                    index=cursor,
                    docs=getdoc(FaultCode.REPEATED_OPTION),
                ))

            try:
                matched = self._matcher.claim(tokens, cursor, found)
            except ParseError as fault:
                self.trigger(fault)

            match matched.option.arity:
                case Arity.NONE:
                    values[matched.option.name] = True
                case Arity.ONE:
                    values[matched.option.name] = matched.values[0]
                case Arity.MANY:
                    values[matched.option.name] = matched.values

            claimed[matched.index] = True
            consumed[cursor:matched.cursor] = [True] * (matched.cursor - cursor)
            cursor = boundary = matched.cursor

        for positional in self._schema.positionals:
            if boundary >= len(tokens):
                self.trigger(MissingPositionalError(
                    "missing positional %r" % positional.metavar,
                    title="missing positional",
                    code=FaultCode.MISSING_POSITIONAL,
                    hint="add %s after the last option; %s" % (positional.metavar, self._hint()),
                    positional=positional,
                    docs=getdoc(FaultCode.MISSING_POSITIONAL),
                ))
            values[positional.name] = tokens[boundary]
            consumed[boundary] = True
            boundary += 1

        for option, taken in zip(options, claimed):
            if option.required and not taken:
                self.trigger(MissingRequiredOptionError(
                    "required option %r is not present" % option.label,
                    title="missing required option",
                    code=FaultCode.MISSING_REQUIRED_OPTION,
                    hint="add %r; %s" % (option.label, self._hint()),
                    option=option,
                    docs=getdoc(FaultCode.MISSING_REQUIRED_OPTION),
                ))

        active = {option.name for option, taken in zip(options, claimed) if taken}
        for option in options:
            if option.name not in active:
                continue
            for name in option.conflicts:
                if name in active:
                    other = self._schema[name]
                    self.trigger(ConflictingOptionsError(
                        "options %r and %r can't both be active" % (option.label, other.label),
                        title="conflicting options",
                        code=FaultCode.CONFLICTING_OPTIONS,
                        hint="keep only one of %r and %r; %s" % (option.label, other.label, self._hint()),
                        option=option,
                        other=other,
                        docs=getdoc(FaultCode.CONFLICTING_OPTIONS),
                    ))

        if leftover := [index for index, taken in enumerate(consumed) if not taken]:
            self.trigger(UnparsedTokensWarning(
                "unparsed input %s from %s position" % (
                    ", ".join(repr(tokens[index]) for index in leftover), ordinal(leftover[0] + 1)
                ),
                title="unparsed input",
                code=FaultCode.UNPARSED_TOKENS,
                hint="positionals are read right after the last option; %s" % self._hint(),
                leftover=tuple(tokens[index] for index in leftover),
                docs=getdoc(FaultCode.UNPARSED_TOKENS),
                stacklevel=6,
            ))

        return self.namespace(**values)

    def parse(self, prompt=Unset, /):
        """
        Parse a prompt into this parser's Namespace record.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string, split via shlex.split.
          • Iterable[str]: pre-tokenized sequence, used as-is.

        Raises
        - TypeError: prompt is not Unset/str/Iterable[str].
        - ParseError subclasses on invalid input; HelpRequested on help.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("parse() argument must be a string or an iterable of strings")
        else:
            raise TypeError("parse() argument must be a string or an iterable of strings")

        return self._parseargs(tuple(tokens))

    __call__ = parse


__all__ = (
    "Parser",
)
