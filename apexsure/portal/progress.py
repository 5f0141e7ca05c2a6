"""
Progress simulation shown while a submission is processing.

The steps advance on a fixed schedule whether or not the backend has answered.
The simulator never influences the outcome; the workflow only waits for it
before showing a success or referral screen.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_STEP_LABELS = (
    "Verifying Identity...",
    "Assessing Risk Score...",
    "Connecting to Legacy Core...",
    "Generating Policy...",
)
DEFAULT_STEP_DELAYS = (0.5, 1.0, 1.5, 2.0)
STEP_COUNT = 4


@dataclass(frozen=True)
class ProgressStep:
    label: str
    active: bool = False
    completed: bool = False


class ProgressSimulator:
    def __init__(
        self,
        labels: Sequence[str] = DEFAULT_STEP_LABELS,
        delays: Sequence[float] = DEFAULT_STEP_DELAYS,
    ) -> None:
        if len(delays) != STEP_COUNT:
            raise ValueError(f"Expected {STEP_COUNT} step delays, got {len(delays)}")
        self.delays = tuple(float(d) for d in delays)
        self._labels = self._check_labels(labels)
        self._steps: List[ProgressStep] = [ProgressStep(label) for label in self._labels]
        self._generation = 0

    @property
    def steps(self) -> List[ProgressStep]:
        return list(self._steps)

    @property
    def running(self) -> bool:
        return any(step.active for step in self._steps)

    async def run(self, labels: Optional[Sequence[str]] = None) -> bool:
        """Advance through all four steps.

        Returns ``False`` if :meth:`cancel` (or :meth:`reset`) was called while
        the run was pending; any remaining advances are then skipped.
        """
        if labels is not None:
            self._labels = self._check_labels(labels)
        self._generation += 1
        generation = self._generation
        self._steps = [ProgressStep(label) for label in self._labels]

        for index, delay in enumerate(self.delays):
            await asyncio.sleep(delay)
            if generation != self._generation:
                logger.debug("Progress run %s cancelled before step %s", generation, index + 1)
                return False
            self._steps = [
                replace(step, active=idx == index, completed=idx < index)
                for idx, step in enumerate(self._steps)
            ]
        return True

    def cancel(self) -> None:
        self._generation += 1

    def complete_all(self) -> None:
        self._steps = [replace(step, active=False, completed=True) for step in self._steps]

    def reset(self) -> None:
        self.cancel()
        self._steps = [ProgressStep(step.label) for step in self._steps]

    @staticmethod
    def _check_labels(labels: Sequence[str]) -> tuple:
        labels = tuple(labels)
        if len(labels) != STEP_COUNT:
            raise ValueError(f"Expected {STEP_COUNT} step labels, got {len(labels)}")
        return labels
