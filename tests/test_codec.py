"""Tests for urlpipe.state.codec: decoding, encoding, and round-trip stability."""

import pytest
from pydantic import ValidationError

from urlpipe.state import (
    PipelineState,
    decode_active,
    decode_configs,
    decode_order,
    decode_state,
    encode_active,
    encode_configs,
    encode_order,
    encode_state,
)

# A spread of messy inputs reused by the property-style checks below
MESSY_PARAMS = [
    {},
    {"u": ""},
    {"order": "", "active": ""},
    {"order": "hostnameReplace"},
    {"order": "bogus,hostnameReplace,bogus2"},
    {"order": "hostnameReplace,hostnameReplace,stripAwsTracking"},
    {"order": ",,,", "active": ",bogus,"},
    {"active": "stripAwsTracking,stripAwsTracking,nope"},
    {"foo.bar": "baz", "hostnameReplace.to": "foo.com"},
    {"hostnameReplace.to": "", "hostnameReplace.extra.dotted": "v.w"},
    {"hostnameReplace": "no-dot", ".to": "x", "hostnameReplace.": "empty-field"},
    {
        "u": "https://ex.com/L0/https%3A%2F%2Fexample.com",
        "order": "hostnameReplace,stripAwsTracking",
        "active": "hostnameReplace,stripAwsTracking",
        "hostnameReplace.to": "foo.com",
        "utm_source": "newsletter",
    },
]


# ── decode_order ────────────────────────────────────────────────────


class TestDecodeOrder:
    def test_absent_is_default(self, registry):
        assert decode_order(None, registry) == ("stripAwsTracking", "hostnameReplace")

    def test_empty_is_default(self, registry):
        assert decode_order("", registry) == registry.all_keys()

    def test_partial_order_appends_missing_last(self, registry):
        assert decode_order("hostnameReplace", registry) == ("hostnameReplace", "stripAwsTracking")

    def test_unknown_segments_dropped(self, registry):
        assert decode_order("x,hostnameReplace,y", registry) == ("hostnameReplace", "stripAwsTracking")

    def test_first_occurrence_wins(self, toy_registry):
        assert decode_order("suffix,upper,suffix", toy_registry) == ("suffix", "upper", "never")

    def test_same_prefix_same_completion(self, toy_registry):
        assert decode_order("suffix", toy_registry) == decode_order("suffix,bogus", toy_registry)

    def test_uses_default_registry_when_omitted(self):
        assert decode_order("hostnameReplace") == ("hostnameReplace", "stripAwsTracking")

    @pytest.mark.parametrize("params", MESSY_PARAMS)
    def test_always_a_permutation(self, registry, params):
        order = decode_order(params.get("order"), registry)
        assert len(order) == len(registry.all_keys())
        assert set(order) == set(registry.all_keys())

    def test_empty_registry(self):
        from urlpipe.transforms import TransformRegistry

        assert decode_order("anything", TransformRegistry([])) == ()


# ── decode_active ───────────────────────────────────────────────────


class TestDecodeActive:
    def test_absent_and_empty_are_empty(self, registry):
        assert decode_active(None, registry) == frozenset()
        assert decode_active("", registry) == frozenset()

    def test_known_keys_deduplicated(self, registry):
        assert decode_active("stripAwsTracking,stripAwsTracking", registry) == {"stripAwsTracking"}

    @pytest.mark.parametrize("params", MESSY_PARAMS)
    def test_subset_of_known_keys(self, registry, params):
        assert decode_active(params.get("active"), registry) <= set(registry.all_keys())


# ── decode_configs ──────────────────────────────────────────────────


class TestDecodeConfigs:
    def test_known_key_recorded(self, registry):
        assert decode_configs({"hostnameReplace.to": "foo.com"}, registry) == {"hostnameReplace": {"to": "foo.com"}}

    def test_unknown_key_ignored(self, registry):
        assert decode_configs({"foo.bar": "baz"}, registry) == {}

    def test_params_without_dot_ignored(self, registry):
        assert decode_configs({"u": "https://a.com", "active": "hostnameReplace"}, registry) == {}

    def test_splits_on_first_dot_only(self, registry):
        configs = decode_configs({"hostnameReplace.a.b": "v"}, registry)
        assert configs == {"hostnameReplace": {"a.b": "v"}}

    def test_value_passed_through_opaquely(self, registry):
        configs = decode_configs({"hostnameReplace.to": "%zz.bad,value"}, registry)
        assert configs["hostnameReplace"]["to"] == "%zz.bad,value"

    def test_empty_value_treated_as_absent(self, registry):
        assert decode_configs({"hostnameReplace.to": ""}, registry) == {}


# ── decode_state ────────────────────────────────────────────────────


class TestDecodeState:
    def test_empty_mapping_gives_total_state(self, registry):
        state = decode_state({}, registry)
        assert state == PipelineState(input="", order=registry.all_keys(), active=frozenset(), configs={})

    def test_full_mapping(self, registry):
        state = decode_state(MESSY_PARAMS[-1], registry)
        assert state.input == "https://ex.com/L0/https%3A%2F%2Fexample.com"
        assert state.order == ("hostnameReplace", "stripAwsTracking")
        assert state.active == {"hostnameReplace", "stripAwsTracking"}
        assert state.config_for("hostnameReplace") == {"to": "foo.com"}
        assert state.config_for("stripAwsTracking") == {}

    def test_state_is_frozen(self, registry):
        state = decode_state({}, registry)
        with pytest.raises(Exception):
            state.input = "x"  # type: ignore[misc]

    def test_config_for_returns_a_copy(self, registry):
        state = decode_state({"hostnameReplace.to": "foo.com"}, registry)
        state.config_for("hostnameReplace")["to"] = "evil.com"
        state.config_for("stripAwsTracking")["x"] = "y"
        assert state.configs == {"hostnameReplace": {"to": "foo.com"}}

    def test_configs_not_shared_with_caller(self, registry):
        configs = {"hostnameReplace": {"to": "foo.com"}}
        state = PipelineState(order=registry.all_keys(), configs=configs)
        configs["hostnameReplace"]["to"] = "evil.com"
        assert state.config_for("hostnameReplace") == {"to": "foo.com"}

    def test_order_is_required(self):
        with pytest.raises(ValidationError):
            PipelineState()


# ── encoders ────────────────────────────────────────────────────────


class TestEncoders:
    def test_default_order_omitted(self, registry):
        assert encode_order(registry.all_keys(), registry) is None

    def test_partial_default_prefix_omitted(self, registry):
        assert encode_order(["stripAwsTracking"], registry) is None

    def test_custom_order_written_in_full(self, registry):
        assert encode_order(["hostnameReplace"], registry) == "hostnameReplace,stripAwsTracking"

    def test_empty_active_omitted(self, registry):
        assert encode_active(frozenset(), registry=registry) is None

    def test_active_follows_pipeline_order(self, toy_registry):
        assert encode_active({"upper", "suffix"}, ["suffix", "never", "upper"], toy_registry) == "suffix,upper"

    def test_active_defaults_to_registration_order(self, toy_registry):
        assert encode_active({"suffix", "upper"}, registry=toy_registry) == "upper,suffix"

    def test_active_drops_unknown_keys(self, registry):
        assert encode_active({"ghost"}, registry=registry) is None

    def test_configs_skip_empty_and_unknown(self, registry):
        flat = encode_configs(
            {"hostnameReplace": {"to": "foo.com", "blank": ""}, "ghost": {"x": "y"}},
            registry,
        )
        assert flat == {"hostnameReplace.to": "foo.com"}

    def test_encode_state_minimal(self, registry):
        assert encode_state(decode_state({}, registry), registry) == {}

    def test_encode_state_full(self, registry):
        params = encode_state(decode_state(MESSY_PARAMS[-1], registry), registry)
        assert params == {
            "u": "https://ex.com/L0/https%3A%2F%2Fexample.com",
            "order": "hostnameReplace,stripAwsTracking",
            "active": "hostnameReplace,stripAwsTracking",
            "hostnameReplace.to": "foo.com",
        }

    def test_unknown_config_keys_do_not_reappear(self, registry):
        params = encode_state(decode_state({"foo.bar": "baz"}, registry), registry)
        assert "foo.bar" not in params


# ── round-trip stability ────────────────────────────────────────────


class TestRoundTrip:
    @pytest.mark.parametrize("params", MESSY_PARAMS)
    def test_decode_encode_decode_is_stable(self, registry, params):
        once = decode_state(params, registry)
        assert decode_state(encode_state(once, registry), registry) == once

    @pytest.mark.parametrize("params", MESSY_PARAMS)
    def test_encode_is_idempotent(self, registry, params):
        first = encode_state(decode_state(params, registry), registry)
        second = encode_state(decode_state(first, registry), registry)
        assert first == second
