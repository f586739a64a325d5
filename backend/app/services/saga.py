"""
Minimal saga runner for multi-step writes without a spanning transaction.

Each step commits on its own. When a step fails, the compensations of the steps
that already completed run newest-first, then the original error propagates.
A compensation that itself fails is logged; it never replaces the original error.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from app.core.logging import get_logger
from app.core.metrics import record_compensation

logger = get_logger(__name__)

Action = Callable[[], Awaitable[Any]]
Compensation = Callable[[Any], Awaitable[None]]


@dataclass
class SagaStep:
    name: str
    action: Action
    compensation: Optional[Compensation] = None


@dataclass
class Saga:
    name: str
    steps: list[SagaStep] = field(default_factory=list)
    results: dict[str, Any] = field(default_factory=dict)

    def add_step(self, name: str, action: Action, compensation: Optional[Compensation] = None) -> "Saga":
        self.steps.append(SagaStep(name, action, compensation))
        return self

    async def run(self) -> dict[str, Any]:
        completed: list[tuple[SagaStep, Any]] = []
        for step in self.steps:
            try:
                result = await step.action()
            except Exception as exc:
                logger.warning(
                    "saga_step_failed",
                    saga=self.name,
                    step=step.name,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                await self._compensate(completed)
                raise
            completed.append((step, result))
            self.results[step.name] = result
        return self.results

    async def _compensate(self, completed: list[tuple[SagaStep, Any]]) -> None:
        for step, result in reversed(completed):
            if step.compensation is None:
                continue
            try:
                await step.compensation(result)
            except Exception as exc:
                logger.error(
                    "saga_compensation_failed",
                    saga=self.name,
                    step=step.name,
                    error=str(exc),
                )
                continue
            record_compensation(self.name, step.name)
            logger.info("saga_step_compensated", saga=self.name, step=step.name)
