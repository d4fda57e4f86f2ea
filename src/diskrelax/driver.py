"""
Driver loop for circle relaxation packing.

Repeatedly runs packing passes with a decaying damping factor until the
circles stop colliding, the iteration budget runs out, or the caller
cancels. Cancellation is only checked between passes.
"""

import numpy as np
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, TextIO

from .config import Circle, PackingConfig, PackingProgress
from .geometry import BoundingBox
from .packer import CirclePacker

RenderHook = Callable[[CirclePacker], None]
CommitHook = Callable[[List[Circle]], None]


class PackingStatus(Enum):
    """How a packing session ended."""
    CONVERGED = "converged"     # A pass reported no collisions
    CANCELLED = "cancelled"     # The caller asked to stop
    EXHAUSTED = "exhausted"     # Iteration budget used up


@dataclass
class PackingResult:
    """Final state of a packing session."""
    circles: List[Circle]
    iterations: int
    status: PackingStatus
    damping: float
    bounding_box: BoundingBox = field(default_factory=BoundingBox.unset)

    @property
    def converged(self) -> bool:
        return self.status is PackingStatus.CONVERGED


class PackingSession:
    """
    Scoped owner of render hooks for one packer.

    Hooks registered through add_render_hook are called after every pass
    and are released when the session exits, however it exits.
    """

    def __init__(self, packer: CirclePacker):
        self.packer = packer
        self._hooks: List[RenderHook] = []
        self._active = False

    def __enter__(self) -> "PackingSession":
        self._active = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def add_render_hook(self, hook: RenderHook) -> None:
        if not self._active:
            raise RuntimeError("Render hooks can only be added inside an active session")
        self._hooks.append(hook)

    @property
    def hooks(self) -> List[RenderHook]:
        return list(self._hooks)

    def render(self) -> None:
        for hook in self._hooks:
            hook(self.packer)

    def close(self) -> None:
        self._hooks.clear()
        self._active = False


def run_packing(
    reference_point,
    config: Optional[PackingConfig] = None,
    render: Optional[RenderHook] = None,
    should_cancel: Optional[Callable[[int], bool]] = None,
    commit: Optional[CommitHook] = None,
    stream: Optional[TextIO] = None,
) -> PackingResult:
    """
    Pack config.count random circles around reference_point.

    Args:
        reference_point: Center the circles are contracted towards
        config: Session parameters (defaults to PackingConfig())
        render: Called with the packer after every pass
        should_cancel: Called with the upcoming iteration number before each pass
        commit: Receives the final (x, y, radius) circles
        stream: Where verbose progress is printed (stdout when None)

    Returns:
        PackingResult describing the final arrangement.
    """
    config = config or PackingConfig()
    config.validate()

    rng = np.random.default_rng(config.seed)
    packer = CirclePacker(reference_point, config.count, config.min_radius, config.max_radius, rng)
    progress = PackingProgress(iteration_limit=config.iteration_limit, damping=config.damping)

    damping = config.damping
    status = PackingStatus.EXHAUSTED
    iterations = 0

    with PackingSession(packer) as session:
        if render is not None:
            session.add_render_hook(render)

        for iteration in range(1, config.iteration_limit + 1):
            if should_cancel is not None and should_cancel(iteration):
                status = PackingStatus.CANCELLED
                if config.verbose:
                    print(f"Packing aborted at iteration {iteration}", file=stream)
                break

            iterations = iteration
            collided = packer.pack(config.algorithm, damping, config.tolerance)

            progress.iteration = iteration
            progress.damping = damping
            progress.moving = packer.moving_count()

            if not collided:
                status = PackingStatus.CONVERGED
                if config.verbose:
                    print(f"Packing completed at iteration {iteration}", file=stream)
                break

            damping *= config.damping_decay
            session.render()

            if config.verbose and iteration % 100 == 0:
                print(progress, file=stream)

    circles = packer.to_circles()
    if commit is not None:
        commit(circles)

    if config.verbose:
        print(f"Done! {progress}", file=stream)

    return PackingResult(
        circles=circles,
        iterations=iterations,
        status=status,
        damping=damping,
        bounding_box=packer.bounding_box(),
    )
