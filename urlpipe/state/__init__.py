"""Pipeline state: models, the flat-mapping codec, and edits."""

from .codec import (
    ACTIVE_PARAM,
    INPUT_PARAM,
    ORDER_PARAM,
    decode_active,
    decode_configs,
    decode_order,
    decode_state,
    encode_active,
    encode_configs,
    encode_order,
    encode_state,
)
from .edits import move, set_config, set_input, toggle
from .models import PipelineRun, PipelineState, StepResult
from .query import build_link, build_query, params_from_link, parse_query

__all__ = [
    "ACTIVE_PARAM",
    "INPUT_PARAM",
    "ORDER_PARAM",
    "PipelineRun",
    "PipelineState",
    "StepResult",
    "build_link",
    "build_query",
    "decode_active",
    "decode_configs",
    "decode_order",
    "decode_state",
    "encode_active",
    "encode_configs",
    "encode_order",
    "encode_state",
    "move",
    "params_from_link",
    "parse_query",
    "set_config",
    "set_input",
    "toggle",
]
