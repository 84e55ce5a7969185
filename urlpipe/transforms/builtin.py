"""Built-in URL transforms."""

from __future__ import annotations

import re
from collections.abc import Mapping

from urlpipe.transforms.models import ConfigField, TransformDefinition
from urlpipe.urls import is_plausible_hostname, split_absolute, strict_unquote, with_hostname

# Marker AWS click-tracking redirects put in front of the encoded target
_AWS_TRACKING_RE = re.compile(r"/L0/([^/]+)")

HOSTNAME_PRESETS: tuple[str, ...] = (
    "epic-pay-by-invoice.reg-preview.crowdcomms.com",
)


def strip_aws_tracking(url: str, config: Mapping[str, str]) -> str | None:
    """Unwrap an AWS tracking link to the URL it redirects to."""
    match = _AWS_TRACKING_RE.search(url)
    if match is None:
        return None
    return strict_unquote(match.group(1))


def hostname_replace(url: str, config: Mapping[str, str]) -> str | None:
    """Swap the hostname of ``url`` for ``config["to"]``."""
    to = config.get("to", "")
    if not is_plausible_hostname(to):
        return None
    parts = split_absolute(url)
    if parts is None:
        return None
    return with_hostname(url, parts, to)


STRIP_AWS_TRACKING = TransformDefinition(
    key="stripAwsTracking",
    label="Strip AWS tracking",
    fn=strip_aws_tracking,
)

HOSTNAME_REPLACE = TransformDefinition(
    key="hostnameReplace",
    label="Replace hostname",
    fn=hostname_replace,
    fields=(ConfigField(name="to", label="hostname", presets=HOSTNAME_PRESETS),),
)

BUILTIN_TRANSFORMS: tuple[TransformDefinition, ...] = (
    STRIP_AWS_TRACKING,
    HOSTNAME_REPLACE,
)
