"""
Mount parameter mini-language.

Components:
- MountParamParser: character-level state machine, string -> directives
- DirectiveRegistry: keyword table (arity, phase, effect) and phase runner
- serialize: directives -> string, inverse of the parser
"""

from .directives import DEFAULT_SPECS, Directive, DirectiveSpec, Phase
from .parser import MountParamParser, ParserState, parse_mount_params, serialize
from .registry import DirectiveRegistry

__all__ = [
    "DEFAULT_SPECS",
    "Directive",
    "DirectiveSpec",
    "Phase",
    "MountParamParser",
    "ParserState",
    "parse_mount_params",
    "serialize",
    "DirectiveRegistry",
]
