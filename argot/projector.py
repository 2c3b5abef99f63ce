"""
Argot result projector.

The projector derives the record type returned by a parse.

- project(schema) → NamedTuple class "Namespace" with one field per option
  followed by one field per positional (each group in declaration order):
    • flag option (nargs=0)         → bool
    • single-value option (nargs=1) → str
    • multi-value option (nargs=n)  → tuple[str, ...] (always exactly n items)
    • positional                    → str
- initialize(schema) → dict of the initial field values: declared defaults when
  present, otherwise the zero value of the field (False, "" or nargs × "").

Both functions are pure. Schema calls project() once at construction and keeps
the class, so one schema always yields the very same record type.
"""
from typing import NamedTuple


def _typeof(entry, /):
    match getattr(entry, "nargs", 1):
        case 0:
            return bool
        case 1:
            return str
        case _:
            return tuple[str, ...]


def project(schema, /):
    """
    Build the record type of a schema.

    Returns
    - type[NamedTuple]: class named "Namespace" whose field order is the
      options then the positionals, as declared.
    """
    fields = [(entry.name, _typeof(entry)) for entry in (*schema.options, *schema.positionals)]
    namespace = NamedTuple("Namespace", fields)
    namespace.__doc__ = "Parse result: %s" % (", ".join(name for name, _ in fields) or "no fields")
    return namespace


def initialize(schema, /):
    """
    Initial field values of a parse, in record field order.
    """
    values = {}
    for option in schema.options:
        match option.nargs:
            case 0:
                values[option.name] = False
            case 1:
                values[option.name] = option.default[0] if option.default else ""
            case nargs:
                values[option.name] = tuple(option.default) if option.default else ("",) * nargs
    for positional in schema.positionals:
        values[positional.name] = ""
    return values


__all__ = (
    "project",
    "initialize",
)
