"""
Argot token matcher.

The matcher answers one question for the parser: what is the token at the
cursor? Either the built-in help request, an option (together with the value
tokens it claims), or nothing known.

Matching policy
- prefix (default): a token matches a form when it starts with that form, so
  "-fvalue" and "-foo" both match "-f". Options are tried in declaration order
  and the first hit wins.
- exact (exact=True): a token matches a form only when equal to it.
- the policy applies to option forms and to the help forms alike.

Slot policy (options taking values)
- lenient (default): the n tokens following the option are taken as values
  unconditionally, even when one of them looks like another flag.
- strict (strict=True): a candidate value that would itself be recognised as a
  flag (an option form or help) is refused with MissingOptionArgumentError.

Faults raised here carry their code, title, hint and position; the parser adds
the runtime context (program name, shell/colorful flags) before surfacing them.
"""
from typing import NamedTuple

from .faults import FaultCode, MissingOptionArgumentError, InvalidOptionArgumentError, getdoc
from .utils import Unset, ordinal
from .validator import HELP_FORMS


class Match(NamedTuple):
    """
    A successful option match.

    - index: position of the option in schema.options.
    - option: the matched Option.
    - values: claimed value tokens (empty for flags).
    - cursor: token index right after the option and its values.
    """
    index: int
    option: object
    values: tuple
    cursor: int


class Matcher:
    """
    Classify tokens against the options of a schema.

    Parameters
    - schema: validated Schema.
    - exact: bool, exact matching instead of prefix matching.
    - strict: bool, refuse flag-looking tokens as option values.
    """

    def __init__(self, schema, /, *, exact=False, strict=False):
        self.schema = schema
        self.exact = bool(exact)
        self.strict = bool(strict)

    def _fits(self, token, form, /):
        if self.exact:
            return token == form
        return token.startswith(form)

    def helps(self, token, /):
        """
        True when the token requests the built-in help.
        """
        return any(self._fits(token, form) for form in HELP_FORMS)

    def find(self, token, /):
        """
        Return (index, option) of the first option matching the token, or None.
        """
        for index, option in enumerate(self.schema.options):
            if any(self._fits(token, form) for form in option.forms):
                return index, option
        return None

    def flagged(self, token, /):
        """
        True when the token would be read as a flag (help or option form).
        """
        return self.helps(token) or self.find(token) is not None

    def match(self, tokens, cursor, /):
        """
        Try to match the token at the cursor and claim its values.

        Returns
        - Match when an option matches, None otherwise.

        Raises
        - see claim().
        """
        if (found := self.find(tokens[cursor])) is None:
            return None
        return self.claim(tokens, cursor, found)

    def claim(self, tokens, cursor, found, /):
        """
        Claim the values of an option already found at the cursor.

        Parameters
        - found: (index, option) pair as returned by find().

        Raises
        - MissingOptionArgumentError: fewer than nargs tokens remain, or (strict)
          a candidate value is itself a flag.
        - InvalidOptionArgumentError: a value is not one of the possible values
          (the first offending value is reported).
        """
        index, option = found
        nargs = option.nargs
        if cursor + nargs >= len(tokens):
            missing = cursor + nargs + 1 - len(tokens)
            raise MissingOptionArgumentError(
                "missing arguments for option %r at %s position" % (option.label, ordinal(cursor + 1)),
                title="missing option arguments",
                code=FaultCode.MISSING_OPTION_ARGUMENT,
                hint="pass %d more value%s after %r" % (missing, "s" * (missing > 1), tokens[cursor]),
                option=option,
                index=cursor,
                docs=getdoc(FaultCode.MISSING_OPTION_ARGUMENT),
            )

        values = tuple(tokens[cursor + 1:cursor + 1 + nargs])
        for offset, value in enumerate(values, cursor + 1):
            if self.strict and self.flagged(value):
                raise MissingOptionArgumentError(
                    "missing arguments for option %r at %s position, %r at %s position is a flag" % (
                        option.label, ordinal(cursor + 1), value, ordinal(offset + 1)
                    ),
                    title="missing option arguments",
                    code=FaultCode.MISSING_OPTION_ARGUMENT,
                    hint="pass %d value%s after %r before any other flag" % (nargs, "s" * (nargs > 1), tokens[cursor]),
                    option=option,
                    index=cursor,
                    value=value,
                    docs=getdoc(FaultCode.MISSING_OPTION_ARGUMENT),
                )
            if option.choices is not Unset and value not in option.choices:
                raise InvalidOptionArgumentError(
                    "invalid argument %r for option %r at %s position" % (value, option.label, ordinal(offset + 1)),
                    title="invalid option argument",
                    code=FaultCode.INVALID_OPTION_ARGUMENT,
                    hint="use one of: %s" % ", ".join(option.choices),
                    option=option,
                    index=offset,
                    value=value,
                    docs=getdoc(FaultCode.INVALID_OPTION_ARGUMENT),
                )

        return Match(index, option, values, cursor + nargs + 1)


__all__ = (
    "Match",
    "Matcher",
)
