"""
Argot schema validator.

validate(entries) walks the declared entries once and returns the list of
SchemaViolation found, in declaration order. It never raises for semantic
problems and never mutates its input; Schema decides to refuse construction
when the list is not empty.

shadowed(options) reports forms that prefix matching can never reach; the
parser applies it unless exact matching is requested.

Entries are told apart through their introspection hooks (__option__ and
__positional__) so this module does not depend on the schema classes.
"""
import keyword
import re

from .faults import SchemaViolation, ViolationCode
from .utils import Unset

HELP_FORMS = ("-h", "--help")


def _blank(text, /):
    return any(char.isspace() for char in text)


def _check_name(entry, kind, /):
    name = entry.name
    if not name:
        yield SchemaViolation(ViolationCode.EMPTY_NAME, f"{kind} name can't be an empty string", entry)
    elif _blank(name):
        yield SchemaViolation(ViolationCode.BLANK_NAME, f"{kind} name {name!r} can't contain blank spaces", entry)
    elif not name.isidentifier() or keyword.iskeyword(name) or name.startswith("_"):
        yield SchemaViolation(
            ViolationCode.ILLEGAL_NAME,
            f"{kind} name {name!r} must be an identifier that does not start with an underscore",
            entry
        )


def _check_forms(option, /):
    if option.short is None and option.long is None:
        yield SchemaViolation(ViolationCode.MISSING_NAMES, f"option {option.name!r} short and long can't both be empty", option)
        return

    if option.short is not None and not re.fullmatch(r"-[^\s-]\S*", option.short):
        yield SchemaViolation(ViolationCode.MALFORMED_NAME, f"option short name {option.short!r} must look like '-x'", option)
    if option.long is not None and not re.fullmatch(r"--[^\s-]\S*", option.long):
        yield SchemaViolation(ViolationCode.MALFORMED_NAME, f"option long name {option.long!r} must look like '--name'", option)

    # The help flag is tested first and by prefix, such forms could never match.
    for form in option.forms:
        if form.startswith(HELP_FORMS):
            yield SchemaViolation(ViolationCode.RESERVED_NAME, f"option name {form!r} is captured by the help flag", option)


def _check_values(option, /):
    nargs = option.nargs
    default = option.default
    choices = option.choices

    if nargs < 0:
        yield SchemaViolation(ViolationCode.INVALID_ARITY, f"option {option.name!r} can't take a negative number of arguments", option)
        return

    if option.required and default is not Unset:
        yield SchemaViolation(ViolationCode.REQUIRED_WITH_DEFAULT, f"required option {option.name!r} can't have default values", option)

    if nargs == 0:
        if default is not Unset:
            yield SchemaViolation(ViolationCode.FLAG_WITH_DEFAULT, f"option {option.name!r} with 0 arguments can't have default values", option)
        if choices is not Unset:
            yield SchemaViolation(ViolationCode.FLAG_WITH_CHOICES, f"option {option.name!r} with 0 arguments can't have possible values", option)
        return

    if default is not Unset:
        if len(default) != nargs:
            yield SchemaViolation(
                ViolationCode.DEFAULT_COUNT,
                f"option {option.name!r} takes {nargs} argument(s) but {len(default)} default value(s) were given",
                option
            )
        if choices is not Unset:
            for value in default:
                if value not in choices:
                    yield SchemaViolation(
                        ViolationCode.DEFAULT_NOT_A_CHOICE,
                        f"default value {value!r} of option {option.name!r} is not a possible value",
                        option
                    )

    if choices is not Unset:
        seen = set()
        for value in choices:
            if not value:
                yield SchemaViolation(ViolationCode.EMPTY_CHOICE, f"possible value of option {option.name!r} can't be an empty string", option)
            elif _blank(value):
                yield SchemaViolation(ViolationCode.BLANK_CHOICE, f"possible value {value!r} can't contain blank spaces", option)
            elif value in seen:
                yield SchemaViolation(ViolationCode.DUPLICATED_CHOICE, f"possible value {value!r} of option {option.name!r} is repeated", option)
            seen.add(value)


def _check_conflicts(option, names, /):
    for name in option.conflicts:
        if name == option.name:
            yield SchemaViolation(ViolationCode.SELF_CONFLICT, f"option {option.name!r} can't conflict with itself", option)
        elif name not in names:
            yield SchemaViolation(ViolationCode.UNKNOWN_CONFLICT, f"option {option.name!r} conflicts with unknown option {name!r}", option)


def validate(entries, /):
    """
    Collect every schema violation of the given entries.

    Rules
    - names: non-empty, no whitespace, identifier-like, unique across entries.
    - options: at least one of short/long, well-formed, not captured by help,
      forms unique across options.
    - arity/defaults: non-negative arity; required excludes default; flags take
      neither defaults nor possible values; default count matches the arity and
      every default is a possible value.
    - possible values: non-empty, no whitespace, no repeats.
    - conflicts: no self reference, only names of options of the same schema.

    Returns
    - list[SchemaViolation], empty when the entries form a valid schema.
    """
    violations = []
    options = [entry for entry in entries if hasattr(entry, "__option__")]
    names = {option.name for option in options}

    seen = set()
    forms = {}
    for entry in entries:
        kind = "option" if hasattr(entry, "__option__") else "positional"
        violations.extend(_check_name(entry, kind))

        if entry.name and entry.name in seen:
            violations.append(SchemaViolation(ViolationCode.DUPLICATED_NAME, f"name {entry.name!r} is declared more than once", entry))
        seen.add(entry.name)

        if kind == "positional":
            continue

        violations.extend(_check_forms(entry))
        for form in entry.forms:
            if form in forms:
                violations.append(SchemaViolation(
                    ViolationCode.DUPLICATED_FORM,
                    f"option name {form!r} is declared by both {forms[form]!r} and {entry.name!r}",
                    entry
                ))
            forms.setdefault(form, entry.name)

        violations.extend(_check_values(entry))
        violations.extend(_check_conflicts(entry, names))

    return violations


def shadowed(options, /):
    """
    Collect the option forms that prefix matching can never reach.

    Options are tried in declaration order and a token matches a form when it
    starts with it, so a form starting with a form of an earlier option always
    resolves to that earlier option. Equal forms are left to DUPLICATED_FORM.

    Returns
    - list[SchemaViolation] with ViolationCode.SHADOWED_FORM, empty when every
      form is reachable.
    """
    violations = []
    earlier = []
    for option in options:
        for form in option.forms:
            for other, prefix in earlier:
                if form != prefix and form.startswith(prefix):
                    violations.append(SchemaViolation(
                        ViolationCode.SHADOWED_FORM,
                        f"option name {form!r} of {option.name!r} is captured by {prefix!r} of {other!r}",
                        option
                    ))
                    break
        earlier.extend((option.name, form) for form in option.forms)
    return violations


__all__ = (
    "validate",
    "shadowed",
)
