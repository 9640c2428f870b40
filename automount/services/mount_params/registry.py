import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Dict, Mapping, Optional, Sequence

from automount.core.exceptions import ArityError, GrammarError
from automount.services.mount.mounted_set import MountedSet
from automount.services.mount_params.directives import (
    DEFAULT_SPECS,
    EXTRA,
    EXTRACT,
    Directive,
    DirectiveSpec,
    Phase,
)

if TYPE_CHECKING:
    from automount.services.mount.orchestrator import MountOrchestrator

# An effect gets the directive's arguments, the shared mounted set and the
# current mode. Returning False tells the pipeline to stop.
DirectiveEffect = Callable[[Sequence[str], MountedSet, bool], Awaitable[bool]]


async def extract_effect(args: Sequence[str], mounted: MountedSet, is_docker: bool) -> bool:
    logging.info("AutoMount skipping, 'extract' registered.")
    return False


class DirectiveRegistry:
    """
    Maps each keyword to its arity, phase and effect and runs them by phase.

    Usage:
        registry = DirectiveRegistry.default(orchestrator)
        if await registry.run_phase(directives, Phase.BEFORE, mounted, is_docker):
            ...
    """

    def __init__(
        self,
        effects: Mapping[str, DirectiveEffect],
        specs: Optional[Mapping[str, DirectiveSpec]] = None,
    ):
        self._specs: Dict[str, DirectiveSpec] = dict(specs if specs is not None else DEFAULT_SPECS)
        missing = set(self._specs) - set(effects)
        if missing:
            raise ValueError(f"No effect registered for keyword(s): {', '.join(sorted(missing))}")
        self._effects: Dict[str, DirectiveEffect] = dict(effects)

    @classmethod
    def default(cls, orchestrator: "MountOrchestrator") -> "DirectiveRegistry":
        async def extra_effect(args: Sequence[str], mounted: MountedSet, is_docker: bool) -> bool:
            file_path, mount_point = args
            return await orchestrator.mount_auxiliary(
                file_path, mount_point, mounted=mounted, is_docker=is_docker
            )

        return cls(
            effects={EXTRACT.keyword: extract_effect, EXTRA.keyword: extra_effect},
            specs=DEFAULT_SPECS,
        )

    @property
    def specs(self) -> Mapping[str, DirectiveSpec]:
        return dict(self._specs)

    def validate(self, directives: Sequence[Directive]) -> None:
        """Raise before anything runs if a directive is unknown or malformed."""
        for directive in directives:
            spec = self._specs.get(directive.keyword)
            if spec is None:
                raise GrammarError(f"Unknown mount directive '{directive.keyword}'")
            if len(directive.args) != spec.arity:
                raise ArityError(directive.keyword, spec.arity, len(directive.args))

    async def run_phase(
        self,
        directives: Sequence[Directive],
        phase: Phase,
        mounted: MountedSet,
        is_docker: bool,
    ) -> bool:
        """
        Run every directive of `phase` in source order.

        Returns False if any of them returned False. The remaining directives
        of the same phase still run; the caller decides what False skips.
        """
        self.validate(directives)

        should_continue = True
        for directive in directives:
            spec = self._specs[directive.keyword]
            if spec.phase is not phase:
                continue
            logging.debug(f"Running {phase.value} directive '{directive.keyword}' {list(directive.args)}")
            if not await self._effects[directive.keyword](directive.args, mounted, is_docker):
                should_continue = False
        return should_continue
