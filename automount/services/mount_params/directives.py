from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Tuple


class Phase(str, Enum):
    """When a directive runs relative to the primary mount."""

    BEFORE = "Before"
    AFTER = "After"


@dataclass(frozen=True)
class DirectiveSpec:
    """
    Static description of a keyword.

    Arity 0 keywords are written as a single word (`extract`), arity 2
    keywords as a triplet (`extra;<key>;<value>;`).
    """

    keyword: str
    arity: int
    phase: Phase

    @property
    def is_single_word(self) -> bool:
        return self.arity == 0

    @property
    def is_triplet(self) -> bool:
        return self.arity == 2


@dataclass(frozen=True)
class Directive:
    keyword: str
    args: Tuple[str, ...] = ()
    phase: Phase = Phase.AFTER


def specs_by_keyword(*specs: DirectiveSpec) -> Dict[str, DirectiveSpec]:
    return {spec.keyword: spec for spec in specs}


EXTRACT = DirectiveSpec(keyword="extract", arity=0, phase=Phase.BEFORE)
EXTRA = DirectiveSpec(keyword="extra", arity=2, phase=Phase.AFTER)

DEFAULT_SPECS: Mapping[str, DirectiveSpec] = specs_by_keyword(EXTRACT, EXTRA)
