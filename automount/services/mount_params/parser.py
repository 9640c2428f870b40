"""
Mount parameter parser.

Grammar, scanned one character at a time:

    extract                      single word, ended by a space or end of input
    extra;<key>;<value>;         triplet, must be followed by a space or end
    \\x                          literal x inside a token

Separators ('-', ' ', ';') between directives are skipped with a warning, so
the launcher's historical "-extract" form still parses.
"""

import logging
from enum import Enum, auto
from typing import Iterable, List, Mapping, Optional

from automount.core.exceptions import GrammarError
from automount.services.mount_params.directives import DEFAULT_SPECS, Directive, DirectiveSpec

SEPARATORS = frozenset("- ;")
ESCAPE = "\\"


class ParserState(Enum):
    BEFORE_WORD = auto()
    IN_WORD = auto()
    IN_TRIPLET_KEY = auto()
    IN_TRIPLET_VALUE = auto()
    AFTER_TRIPLET = auto()


class MountParamParser:
    """Finite-state parser turning a parameter string into directives."""

    def __init__(self, specs: Optional[Mapping[str, DirectiveSpec]] = None):
        self._specs = dict(specs if specs is not None else DEFAULT_SPECS)

    @property
    def single_words(self) -> List[str]:
        return sorted(k for k, spec in self._specs.items() if spec.is_single_word)

    @property
    def triplet_types(self) -> List[str]:
        return sorted(k for k, spec in self._specs.items() if spec.is_triplet)

    def parse(self, raw: str) -> List[Directive]:
        directives: List[Directive] = []
        state = ParserState.BEFORE_WORD
        escaped = False
        token = ""
        fields: List[str] = []

        for position, char in enumerate(raw):
            if escaped:
                token += char
                escaped = False
                continue

            if char == ESCAPE:
                if state is ParserState.BEFORE_WORD:
                    raise GrammarError(
                        "the first character of a mount parameter can't be escaped", position
                    )
                if state is ParserState.AFTER_TRIPLET:
                    raise GrammarError("expected space after triplet mount parameter", position)
                escaped = True
                continue

            if state is ParserState.BEFORE_WORD:
                if char in SEPARATORS:
                    logging.warning(f"Ignoring leading mount parameter character: '{char}'")
                    continue
                token = char
                state = ParserState.IN_WORD

            elif state is ParserState.IN_WORD:
                if char == " ":
                    directives.append(self._single_word(token, position))
                    token = ""
                    state = ParserState.BEFORE_WORD
                elif char == ";":
                    self._check_triplet_type(token, position)
                    fields = [token]
                    token = ""
                    state = ParserState.IN_TRIPLET_KEY
                else:
                    token += char

            elif state is ParserState.IN_TRIPLET_KEY:
                if char == ";":
                    fields.append(token)
                    token = ""
                    state = ParserState.IN_TRIPLET_VALUE
                else:
                    token += char

            elif state is ParserState.IN_TRIPLET_VALUE:
                if char == ";":
                    fields.append(token)
                    directives.append(self._triplet(fields))
                    fields = []
                    token = ""
                    state = ParserState.AFTER_TRIPLET
                else:
                    token += char

            elif state is ParserState.AFTER_TRIPLET:
                if char != " ":
                    raise GrammarError("expected space after triplet mount parameter", position)
                state = ParserState.BEFORE_WORD

        if escaped:
            raise GrammarError("mount parameters end with a dangling escape", len(raw))

        if state is ParserState.IN_WORD:
            # End of input terminates a single word
            directives.append(self._single_word(token, len(raw)))
        elif state is ParserState.IN_TRIPLET_KEY:
            raise GrammarError(
                "parameters ended in the middle of a triplet, final triplet element missing"
            )
        elif state is ParserState.IN_TRIPLET_VALUE:
            raise GrammarError(
                "parameters ended while parsing the final element of a triplet, "
                "missing semicolon?"
            )

        logging.debug(f"Parsed mount parameters {[d.keyword for d in directives]}")
        return directives

    def _single_word(self, token: str, position: int) -> Directive:
        spec = self._specs.get(token)
        if spec is None or not spec.is_single_word:
            raise GrammarError(f'unrecognized single-word mount parameter "{token}"', position)
        return Directive(keyword=token, args=(), phase=spec.phase)

    def _check_triplet_type(self, token: str, position: int) -> None:
        spec = self._specs.get(token)
        if spec is None or not spec.is_triplet:
            raise GrammarError(f'unrecognized triplet type "{token}"', position)

    def _triplet(self, fields: List[str]) -> Directive:
        keyword, key, value = fields
        return Directive(keyword=keyword, args=(key, value), phase=self._specs[keyword].phase)


def parse_mount_params(
    raw: str, specs: Optional[Mapping[str, DirectiveSpec]] = None
) -> List[Directive]:
    """Parse with the default keyword table unless one is given."""
    return MountParamParser(specs).parse(raw)


def _escape(text: str, special: str) -> str:
    return "".join(ESCAPE + c if c in special else c for c in text)


def serialize(directives: Iterable[Directive]) -> str:
    """
    Render directives back into parameter syntax.

    parse(serialize(parse(s))) == parse(s) for every string parse accepts.
    """
    parts = []
    for directive in directives:
        if directive.keyword[:1] in SEPARATORS or directive.keyword[:1] == ESCAPE:
            raise GrammarError(f'keyword "{directive.keyword}" cannot be written as a parameter')
        keyword = directive.keyword[0] + _escape(directive.keyword[1:], " ;" + ESCAPE)
        if not directive.args:
            parts.append(keyword)
        else:
            fields = [_escape(arg, ";" + ESCAPE) for arg in directive.args]
            parts.append(";".join([keyword, *fields]) + ";")
    return " ".join(parts)
