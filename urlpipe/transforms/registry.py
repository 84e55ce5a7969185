"""Transform registry and entry-point plugin discovery."""

from __future__ import annotations

import importlib.metadata
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from urlpipe.transforms.builtin import BUILTIN_TRANSFORMS
from urlpipe.transforms.models import TransformDefinition

if TYPE_CHECKING:
    from urlpipe.config.models import PluginsConfig

logger = logging.getLogger(__name__)

# Entry point group third-party packages register transforms under
ENTRY_POINT_GROUP = "urlpipe.transforms"


class TransformNotFoundError(LookupError):
    """Raised when a named transform plugin cannot be found."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No transform plugin found with name '{name}'")


class TransformRegistry:
    """Ordered, read-only catalog of transforms keyed by ``key``.

    Registration order is the canonical default pipeline order.
    """

    def __init__(self, definitions: Iterable[TransformDefinition]) -> None:
        self._by_key: dict[str, TransformDefinition] = {}
        for definition in definitions:
            if definition.key in self._by_key:
                raise ValueError(f"Duplicate transform key: {definition.key!r}")
            self._by_key[definition.key] = definition
        self._keys = tuple(self._by_key)

    def lookup(self, key: str) -> TransformDefinition | None:
        return self._by_key.get(key)

    def all(self) -> tuple[TransformDefinition, ...]:
        return tuple(self._by_key.values())

    def all_keys(self) -> tuple[str, ...]:
        return self._keys

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return f"TransformRegistry({', '.join(self._keys)})"


_DEFAULT = TransformRegistry(BUILTIN_TRANSFORMS)


def default_registry() -> TransformRegistry:
    """The built-in catalog, without plugins."""
    return _DEFAULT


def discover_plugins() -> list[str]:
    """Names of every transform registered under the entry-point group."""
    return [ep.name for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP)]


def _load_entry_point(ep: importlib.metadata.EntryPoint) -> TransformDefinition | None:
    try:
        loaded = ep.load()
    except Exception as exc:
        logger.warning("Skipping transform plugin %s: import failed: %s", ep.name, exc)
        return None
    if not isinstance(loaded, TransformDefinition):
        logger.warning(
            "Skipping transform plugin %s: expected TransformDefinition, got %s",
            ep.name,
            type(loaded).__name__,
        )
        return None
    return loaded


def load_registry(config: PluginsConfig | None = None) -> TransformRegistry:
    """Build a registry from the built-ins plus entry-point plugins.

    With ``config.names`` set, only those plugins are loaded and each must
    exist. Otherwise every discovered plugin is loaded.
    """
    if config is not None and not config.enabled:
        return _DEFAULT

    eps = {ep.name: ep for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP)}
    wanted = list(config.names) if config is not None and config.names else list(eps)
    for name in wanted:
        if name not in eps:
            raise TransformNotFoundError(name)

    definitions = list(BUILTIN_TRANSFORMS)
    seen = {d.key for d in definitions}
    for name in wanted:
        definition = _load_entry_point(eps[name])
        if definition is None:
            continue
        if definition.key in seen:
            logger.warning("Skipping transform plugin %s: key %r already registered", name, definition.key)
            continue
        seen.add(definition.key)
        definitions.append(definition)
        logger.debug("Loaded transform plugin %s (%s)", name, definition.key)

    return TransformRegistry(definitions)
