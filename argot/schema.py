r"""
Argot schema model: options, positionals and the validated schema.

Overview
- Entries
  • Option: named entry (-f/--foo) with a fixed arity: a boolean flag (nargs=0),
    a single value (nargs=1) or a fixed count of values (nargs=n, n >= 2).
  • Positional: argument identified by position; always exactly one string.

- Schema
  • Ordered, immutable collection of entries. Construction runs the validator
    once and refuses to exist when any rule is broken (SchemaError), so an
    invalid schema never reaches the parser.
  • Positional order is the consumption order; option order is the matching
    precedence and the help order.

- Introspection & representation
  • SpecType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields named in __introspectable__ as read-only, frozen properties.

Sanitization (on entry construction, Python-level contract)
- name/names/metavar/descr must be strings, nargs an integer, default/choices/
  conflicts strings or iterables of strings. Wrong types raise TypeError.
- metavar and descr cannot be blank when given (ValueError).
- Semantic rules (empty names, arity/default consistency, possible values,
  conflicts) are collected by argot.validator when the Schema is built.

Quick example:
    >>> schema = Schema(
    ...     Option("verbose", "-v", "--verbose", descr="talk more"),
    ...     Option("level", "-l", "--level", nargs=1, choices=("low", "high"), default="low"),
    ...     Positional("path", "PATH"),
    ... )
    >>> schema["level"].arity
    <Arity.ONE: 1>
"""
import functools
import operator
import re
from collections.abc import Iterable
from enum import IntEnum

from .utils import *
from .validator import validate
from .projector import project
from .faults import SchemaError


class Arity(IntEnum):
    """
    Number of value tokens an option consumes.

    - NONE: boolean flag, presence sets True.
    - ONE: exactly one value.
    - MANY: a fixed count n >= 2 of values.
    """
    NONE = 0
    ONE = 1
    MANY = 2


class SpecType(type):
    """
    Metaclass that gives schema classes a stable, introspectable surface.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in messages.
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_{name}" field (containers frozen on access).
    - Provide __repr__/__rich_repr__ for diagnostics and rich pretty printing.
    - Seal classes created with sealed=True against subclassing.
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
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        if options.get("sealed", False):
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _sanitize_string(cls, field, object, /, *, blank=True):
    """
    Internal: require a string; optionally forbid blank strings (after trimming).
    """
    if not isinstance(object, str):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    if not blank and not object.strip():
        raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")
    return object


def _sanitize_strings(cls, field, object, /):
    """
    Internal: normalize an iterable of strings into a tuple (order preserved).

    A plain string is rejected: it is almost always a forgotten tuple comma.
    """
    if isinstance(object, str) or not isinstance(object, Iterable):
        raise TypeError(f"{cls.__typename__} {field!r} must be an iterable of strings")
    sanitized = tuple(object)
    if not all(isinstance(item, str) for item in sanitized):
        raise TypeError(f"{cls.__typename__} {field!r} must be an iterable of strings")
    return sanitized


class Option(metaclass=SpecType, sealed=True):
    """
    Named entry matched by its short and/or long form.

    Parameters
    - name: str (positional-only)
      Result field name. Must be a usable identifier (checked by the validator).
    - names: str...
      At most one short form ("-f") and one long form ("--foo"); a form starting
      with "--" is long, any other is short.
    - metavar: str
      Placeholder shown in help ("ARG" when omitted).
    - nargs: int
      0 → boolean flag, 1 → single value, n >= 2 → fixed count of values.
    - required: bool
      The option must appear in the input.
    - default: Unset | str | Iterable[str]
      Preset value(s); a single string counts as one value.
    - choices: Unset | Iterable[str]
      Closed set of allowed values, in display order.
    - conflicts: Iterable[str]
      Names of options that cannot be active together with this one.
    - descr: Unset | str
      Help description line.
    """

    __introspectable__ = (
        "name",
        "short",
        "long",
        "metavar",
        "nargs",
        "required",
        "default",
        "choices",
        "conflicts",
        "descr",
    )

    def __new__(
            cls,
            name,
            /,
            *names,
            metavar="ARG",
            nargs=0,
            required=False,
            default=Unset,
            choices=Unset,
            conflicts=(),
            descr=Unset
    ):
        self = super().__new__(cls)
        self._name = _sanitize_string(cls, "name", name)

        short = long = None
        for form in names:
            _sanitize_string(cls, "names", form)
            if form.startswith("--"):
                if long is not None:
                    raise TypeError(f"{cls.__typename__} accepts at most one long name")
                long = form
            else:
                if short is not None:
                    raise TypeError(f"{cls.__typename__} accepts at most one short name")
                short = form
        self._short = short
        self._long = long

        self._metavar = _sanitize_string(cls, "metavar", metavar, blank=False).strip()

        if not isinstance(nargs, int) or isinstance(nargs, bool):
            raise TypeError(f"{cls.__typename__} 'nargs' must be an integer")
        self._nargs = nargs
        self._required = bool(required)

        # A single string is one value, not an iterable of characters.
        if isinstance(default, str):
            default = (default,)
        self._default = default if default is Unset else _sanitize_strings(cls, "default", default)
        self._choices = choices if choices is Unset else _sanitize_strings(cls, "choices", choices)
        self._conflicts = _sanitize_strings(cls, "conflicts", conflicts)

        if descr is not Unset:
            descr = _sanitize_string(cls, "descr", descr, blank=False).strip()
        self._descr = coalesce(descr)
        return self

    @property
    def arity(self):
        """
        Arity derived from nargs (MANY for any count >= 2).
        """
        return Arity(min(max(self._nargs, 0), Arity.MANY))

    @property
    def forms(self):
        """
        Declared forms in (short, long) order, absent ones skipped.
        """
        return tuple(form for form in (self._short, self._long) if form is not None)

    @property
    def label(self):
        """
        Name shown in diagnostics: long form, else short form, else the field name.
        """
        return self._long or self._short or self._name

    def __option__(self):
        """
        Introspection hook: identify this entry as an Option.
        """
        return self


class Positional(metaclass=SpecType, sealed=True):
    """
    Entry identified by position; it always receives exactly one string.

    Parameters
    - name: str
      Result field name.
    - metavar: Unset | str
      Placeholder shown in usage/help; defaults to the upper-cased name.
    - descr: Unset | str
      Help description line.
    """

    __introspectable__ = (
        "name",
        "metavar",
        "descr",
    )

    def __new__(cls, name, metavar=Unset, /, descr=Unset):
        self = super().__new__(cls)
        self._name = _sanitize_string(cls, "name", name)
        if metavar is Unset:
            metavar = name.upper()
        else:
            metavar = _sanitize_string(cls, "metavar", metavar, blank=False).strip()
        self._metavar = metavar
        if descr is not Unset:
            descr = _sanitize_string(cls, "descr", descr, blank=False).strip()
        self._descr = coalesce(descr)
        return self

    @property
    def label(self):
        return self._metavar or self._name

    def __positional__(self):
        """
        Introspection hook: identify this entry as a Positional.
        """
        return self


class Schema(metaclass=SpecType, sealed=True):
    """
    Ordered, validated and immutable collection of Option/Positional entries.

    Construction
    - Schema(*entries) runs argot.validator.validate once over the entries and
      raises SchemaError (an ExceptionGroup of SchemaViolation) when any rule
      is broken.

    Access
    - entries / options / positionals: declaration-ordered tuples.
    - schema[name]: entry lookup by name (KeyError when unknown).
    - namespace: the projected result record type (see argot.projector).
    """

    __introspectable__ = (
        "options",
        "positionals",
    )

    def __new__(cls, *entries):
        for entry in entries:
            if not isinstance(entry, Option | Positional):
                raise TypeError(f"{cls.__typename__} entries must be options or positionals")

        if violations := validate(entries):
            raise SchemaError(violations)

        self = super().__new__(cls)
        self._entries = entries
        self._options = tuple(entry for entry in entries if isinstance(entry, Option))
        self._positionals = tuple(entry for entry in entries if isinstance(entry, Positional))
        self._lookup = {entry.name: entry for entry in entries}
        self._namespace = project(self)
        return self

    @property
    def entries(self):
        return self._entries

    @property
    def namespace(self):
        return self._namespace

    def __getitem__(self, name, /):
        return self._lookup[name]

    def __contains__(self, name, /):
        return name in self._lookup

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)


__all__ = (
    "Arity",
    "Option",
    "Positional",
    "Schema",
)
