"""Pydantic models for pipeline state and run results."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class PipelineState(BaseModel):
    """Structured view of a flat parameter mapping.

    ``order`` is always a full permutation of the registry's keys and
    ``active`` a subset of them; the codec guarantees both.
    """

    model_config = ConfigDict(frozen=True)

    input: str = ""
    order: tuple[str, ...]
    active: frozenset[str] = frozenset()
    configs: dict[str, dict[str, str]] = Field(default_factory=dict)

    def config_for(self, key: str) -> dict[str, str]:
        """A copy of the config for ``key``; empty when none is set."""
        return dict(self.configs.get(key, {}))

    def active_order(self) -> tuple[str, ...]:
        """Active keys in pipeline order."""
        return tuple(k for k in self.order if k in self.active)


class StepResult(BaseModel):
    """Outcome of one transform during a run."""

    model_config = ConfigDict(frozen=True)

    key: str
    result: str | None
    output: str

    @property
    def applied(self) -> bool:
        return self.result is not None

    @property
    def status(self) -> Literal["applied", "no match"]:
        return "applied" if self.applied else "no match"


class PipelineRun(BaseModel):
    """Every step of a run plus the final value."""

    model_config = ConfigDict(frozen=True)

    steps: tuple[StepResult, ...] = ()
    output: str = ""

    def result_for(self, key: str) -> StepResult | None:
        for step in self.steps:
            if step.key == key:
                return step
        return None
