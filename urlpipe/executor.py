"""Pipeline executor: folds active transforms over the input."""

from __future__ import annotations

import logging
from functools import reduce

from urlpipe.state.models import PipelineRun, PipelineState, StepResult
from urlpipe.transforms.models import TransformDefinition
from urlpipe.transforms.registry import TransformRegistry, default_registry

logger = logging.getLogger(__name__)


def _invoke(definition: TransformDefinition, value: str, config: dict[str, str]) -> str | None:
    """Call a transform, treating contract violations as "not applicable"."""
    try:
        result = definition.fn(value, config)
    except Exception as exc:
        logger.warning("Transform %s raised %s; passing input through", definition.key, exc)
        return None
    if result is not None and not isinstance(result, str):
        logger.warning(
            "Transform %s returned %s instead of str; passing input through",
            definition.key,
            type(result).__name__,
        )
        return None
    return result


def run(state: PipelineState, registry: TransformRegistry | None = None) -> PipelineRun:
    """Run every active transform in order.

    A step that doesn't apply passes its input through unchanged and the
    pipeline carries on; the run never aborts.
    """
    registry = default_registry() if registry is None else registry

    def step(acc: tuple[StepResult, ...], key: str) -> tuple[StepResult, ...]:
        current = acc[-1].output if acc else state.input
        definition = registry.lookup(key)
        result = None if definition is None else _invoke(definition, current, state.config_for(key))
        logger.debug("step %s: %s", key, "applied" if result is not None else "no match")
        return acc + (StepResult(key=key, result=result, output=current if result is None else result),)

    steps = reduce(step, state.active_order(), ())
    return PipelineRun(steps=steps, output=steps[-1].output if steps else state.input)
