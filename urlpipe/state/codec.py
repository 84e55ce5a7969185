"""Flat parameter mapping <-> PipelineState.

Decoding is lenient: unknown keys, stray delimiters and empty values are
dropped so any mapping yields a total, usable state. Encoding is minimal:
defaults and empty values are left out, so ``encode(decode(x))`` is stable.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from urlpipe.state.models import PipelineState
from urlpipe.transforms.registry import TransformRegistry, default_registry

INPUT_PARAM = "u"
ORDER_PARAM = "order"
ACTIVE_PARAM = "active"

KEY_DELIMITER = ","
FIELD_DELIMITER = "."


def _resolve(registry: TransformRegistry | None) -> TransformRegistry:
    return default_registry() if registry is None else registry


def _known(raw: str, registry: TransformRegistry) -> list[str]:
    return [k for k in raw.split(KEY_DELIMITER) if k in registry]


# -- decoding ----------------------------------------------------------------


def decode_order(raw: str | None, registry: TransformRegistry | None = None) -> tuple[str, ...]:
    """Complete a partial order into a full permutation of the registry keys.

    Listed known keys come first (first occurrence wins); the rest follow
    in registration order.
    """
    registry = _resolve(registry)
    if not raw:
        return registry.all_keys()
    keys = list(dict.fromkeys(_known(raw, registry)))
    missing = [k for k in registry.all_keys() if k not in keys]
    return tuple(keys + missing)


def decode_active(raw: str | None, registry: TransformRegistry | None = None) -> frozenset[str]:
    registry = _resolve(registry)
    if not raw:
        return frozenset()
    return frozenset(_known(raw, registry))


def decode_configs(
    params: Mapping[str, str], registry: TransformRegistry | None = None
) -> dict[str, dict[str, str]]:
    """Collect non-empty ``<key>.<field>`` parameters for known keys.

    The name is split at the first dot only, so fields may contain dots.
    """
    registry = _resolve(registry)
    configs: dict[str, dict[str, str]] = {}
    for name, value in params.items():
        key, sep, field = name.partition(FIELD_DELIMITER)
        if not sep or not value or key not in registry:
            continue
        configs.setdefault(key, {})[field] = value
    return configs


def decode_state(params: Mapping[str, str], registry: TransformRegistry | None = None) -> PipelineState:
    registry = _resolve(registry)
    return PipelineState(
        input=params.get(INPUT_PARAM) or "",
        order=decode_order(params.get(ORDER_PARAM), registry),
        active=decode_active(params.get(ACTIVE_PARAM), registry),
        configs=decode_configs(params, registry),
    )


# -- encoding ----------------------------------------------------------------


def encode_order(order: Iterable[str], registry: TransformRegistry | None = None) -> str | None:
    """Serialize ``order``, or None when it matches the default."""
    registry = _resolve(registry)
    canonical = decode_order(KEY_DELIMITER.join(order), registry)
    if canonical == registry.all_keys():
        return None
    return KEY_DELIMITER.join(canonical)


def encode_active(
    active: Iterable[str],
    order: Iterable[str] | None = None,
    registry: TransformRegistry | None = None,
) -> str | None:
    """Serialize the active set in pipeline order, or None when empty."""
    registry = _resolve(registry)
    members = set(active)
    sequence = decode_order(KEY_DELIMITER.join(order), registry) if order is not None else registry.all_keys()
    keys = [k for k in sequence if k in members]
    if not keys:
        return None
    return KEY_DELIMITER.join(keys)


def encode_configs(
    configs: Mapping[str, Mapping[str, str]], registry: TransformRegistry | None = None
) -> dict[str, str]:
    """Flatten configs to ``<key>.<field>`` parameters, skipping empty values."""
    registry = _resolve(registry)
    flat: dict[str, str] = {}
    for key in registry.all_keys():
        for field, value in configs.get(key, {}).items():
            if value:
                flat[f"{key}{FIELD_DELIMITER}{field}"] = value
    return flat


def encode_state(state: PipelineState, registry: TransformRegistry | None = None) -> dict[str, str]:
    """Minimal flat mapping that decodes back to ``state``."""
    registry = _resolve(registry)
    params: dict[str, str] = {}
    if state.input:
        params[INPUT_PARAM] = state.input
    order = encode_order(state.order, registry)
    if order is not None:
        params[ORDER_PARAM] = order
    active = encode_active(state.active, state.order, registry)
    if active is not None:
        params[ACTIVE_PARAM] = active
    params.update(encode_configs(state.configs, registry))
    return params
