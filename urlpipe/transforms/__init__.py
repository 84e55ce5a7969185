"""Transform catalog: definitions, built-ins, and the registry."""

from .builtin import (
    BUILTIN_TRANSFORMS,
    HOSTNAME_PRESETS,
    HOSTNAME_REPLACE,
    STRIP_AWS_TRACKING,
    hostname_replace,
    strip_aws_tracking,
)
from .models import ConfigField, TransformDefinition, TransformFn
from .registry import (
    ENTRY_POINT_GROUP,
    TransformNotFoundError,
    TransformRegistry,
    default_registry,
    discover_plugins,
    load_registry,
)

__all__ = [
    "BUILTIN_TRANSFORMS",
    "ConfigField",
    "ENTRY_POINT_GROUP",
    "HOSTNAME_PRESETS",
    "HOSTNAME_REPLACE",
    "STRIP_AWS_TRACKING",
    "TransformDefinition",
    "TransformFn",
    "TransformNotFoundError",
    "TransformRegistry",
    "default_registry",
    "discover_plugins",
    "hostname_replace",
    "load_registry",
    "strip_aws_tracking",
]
