"""Shared test fixtures for urlpipe."""

import pytest

from urlpipe.config.models import UrlpipeConfig
from urlpipe.transforms import TransformDefinition, TransformRegistry, default_registry


def _upper(value, config):
    return value.upper()


def _never(value, config):
    return None


def _suffix(value, config):
    suffix = config.get("text", "")
    return value + suffix if suffix else None


UPPER = TransformDefinition(key="upper", label="Uppercase", fn=_upper)
NEVER = TransformDefinition(key="never", label="Never applies", fn=_never)
SUFFIX = TransformDefinition(key="suffix", label="Append suffix", fn=_suffix)


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def toy_registry():
    """Three non-URL transforms, handy for order-sensitive checks."""
    return TransformRegistry([UPPER, NEVER, SUFFIX])


@pytest.fixture
def sample_config():
    return UrlpipeConfig()
