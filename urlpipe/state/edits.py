"""Edits a front end applies to the flat parameter mapping.

Each edit returns a new mapping and leaves unrelated parameters alone.
Edits naming an unknown transform return an unchanged copy.
"""

from __future__ import annotations

from collections.abc import Mapping

from urlpipe.state.codec import (
    ACTIVE_PARAM,
    FIELD_DELIMITER,
    INPUT_PARAM,
    ORDER_PARAM,
    decode_active,
    decode_order,
    encode_active,
    encode_order,
)
from urlpipe.transforms.registry import TransformRegistry, default_registry


def _put(params: dict[str, str], name: str, value: str | None) -> dict[str, str]:
    if value:
        params[name] = value
    else:
        params.pop(name, None)
    return params


def set_input(params: Mapping[str, str], value: str) -> dict[str, str]:
    return _put(dict(params), INPUT_PARAM, value)


def toggle(params: Mapping[str, str], key: str, registry: TransformRegistry | None = None) -> dict[str, str]:
    """Flip whether ``key`` is active."""
    registry = default_registry() if registry is None else registry
    if key not in registry:
        return dict(params)
    active = set(decode_active(params.get(ACTIVE_PARAM), registry))
    active.symmetric_difference_update({key})
    order = decode_order(params.get(ORDER_PARAM), registry)
    return _put(dict(params), ACTIVE_PARAM, encode_active(active, order, registry))


def set_config(
    params: Mapping[str, str],
    key: str,
    field: str,
    value: str,
    registry: TransformRegistry | None = None,
) -> dict[str, str]:
    """Set ``<key>.<field>``; an empty value removes it."""
    registry = default_registry() if registry is None else registry
    if key not in registry:
        return dict(params)
    return _put(dict(params), f"{key}{FIELD_DELIMITER}{field}", value)


def move(
    params: Mapping[str, str],
    key: str,
    direction: int,
    registry: TransformRegistry | None = None,
) -> dict[str, str]:
    """Swap ``key`` with its neighbour; -1 moves it earlier, +1 later.

    Moving past either end is a no-op.
    """
    if direction not in (-1, 1):
        raise ValueError(f"direction must be -1 or 1, got {direction!r}")
    registry = default_registry() if registry is None else registry
    order = list(decode_order(params.get(ORDER_PARAM), registry))
    if key not in order:
        return dict(params)
    idx = order.index(key)
    swap_with = idx + direction
    if not 0 <= swap_with < len(order):
        return dict(params)
    order[idx], order[swap_with] = order[swap_with], order[idx]
    return _put(dict(params), ORDER_PARAM, encode_order(order, registry))
