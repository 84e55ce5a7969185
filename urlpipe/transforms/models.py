"""Data models for transform definitions."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

# fn(input, config) -> new value, or None for "not applicable"
TransformFn = Callable[[str, Mapping[str, str]], "str | None"]


@dataclass(frozen=True)
class ConfigField:
    """A named scalar a transform reads from its config mapping."""

    name: str
    label: str = ""
    presets: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name or "." in self.name:
            raise ValueError(f"config field name must be non-empty and dot-free, got {self.name!r}")


@dataclass(frozen=True)
class TransformDefinition:
    """A registered transform: stable key, display label, and a pure function.

    ``fn`` must be total. It returns ``None`` when the input doesn't apply
    and never raises. Unknown config fields are ignored by the function.
    """

    key: str
    label: str
    fn: TransformFn
    fields: tuple[ConfigField, ...] = ()

    def __post_init__(self) -> None:
        if not self.key or any(c in self.key for c in ".,"):
            raise ValueError(f"transform key must be non-empty without '.' or ',', got {self.key!r}")

    def field(self, name: str) -> ConfigField | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None
