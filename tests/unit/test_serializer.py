"""
Unit Tests for the Save Codec
=============================

Test Coverage
-------------
- serialize/deserialize round trip, including marketing and entitlements
- Every rejection path returns None instead of raising
"""

import json
from dataclasses import replace

import pytest

from idlefinance.modules.persistence import deserialize_player_state, serialize_player_state


@pytest.fixture
def played_state(fresh_state):
    """A state with progress in every section."""
    return replace(
        fresh_state,
        cash=1234.5,
        last_seen_at=60_000,
        assets_owned={"lemonade_stand": 7, "rental_flat": 2},
        upgrades_owned={**fresh_state.upgrades_owned, "double_lemons": True, "franchise": 3},
        marketing={"utm": {"source": "newsletter", "campaign": "spring"}},
        entitlements={"ad_free": {"granted_at": 1_700_000_000_000}},
    )


@pytest.mark.unit
class TestSerializePlayerState:
    """Test the encode side."""

    def test_serialize_produces_camel_case_json(self, played_state):
        """Test that the payload is the camelCase save shape."""
        payload = json.loads(serialize_player_state(played_state))

        assert payload["schemaVersion"] == 1
        assert payload["assetsOwned"] == {"lemonade_stand": 7, "rental_flat": 2}
        assert payload["upgradesOwned"]["franchise"] == 3
        assert payload["marketing"]["utm"]["campaign"] == "spring"

    def test_round_trip_preserves_state(self, played_state):
        """Test that decode(encode(s)) == s, side channels included."""
        restored = deserialize_player_state(serialize_player_state(played_state))

        assert restored == played_state
        assert restored.entitlements == {"ad_free": {"granted_at": 1_700_000_000_000}}

    def test_non_ascii_marketing_survives(self, fresh_state):
        """Test that unicode side-channel values are kept verbatim."""
        state = replace(fresh_state, marketing={"utm": {"source": "café"}})

        raw = serialize_player_state(state)

        assert "café" in raw
        assert deserialize_player_state(raw).marketing == {"utm": {"source": "café"}}


@pytest.mark.unit
class TestDeserializePlayerState:
    """Test the decode side's rejection paths."""

    @pytest.mark.parametrize("raw", [None, ""])
    def test_empty_input(self, raw):
        """Test that nothing stored decodes to None."""
        assert deserialize_player_state(raw) is None

    def test_invalid_json(self):
        """Test that corrupt text decodes to None."""
        assert deserialize_player_state("{not json") is None

    @pytest.mark.parametrize("raw", ["[]", "42", '"save"', "null"])
    def test_non_object_payload(self, raw):
        """Test that JSON that is not an object decodes to None."""
        assert deserialize_player_state(raw) is None

    @pytest.mark.parametrize("version", [None, "1", True])
    def test_missing_or_non_numeric_version(self, played_state, version):
        """Test that schemaVersion must be present and numeric."""
        payload = played_state.to_dict()
        if version is None:
            del payload["schemaVersion"]
        else:
            payload["schemaVersion"] = version

        assert deserialize_player_state(json.dumps(payload)) is None

    def test_version_mismatch(self, played_state):
        """Test that a save from another schema version is discarded."""
        raw = serialize_player_state(played_state)

        assert deserialize_player_state(raw, expected_schema_version=2) is None

    def test_invariant_violation(self, played_state):
        """Test that a structurally valid but invalid state is discarded."""
        payload = played_state.to_dict()
        payload["cash"] = -1

        assert deserialize_player_state(json.dumps(payload)) is None

    def test_missing_required_field(self, played_state):
        """Test that a payload without cash is discarded."""
        payload = played_state.to_dict()
        del payload["lastSeenAt"]

        assert deserialize_player_state(json.dumps(payload)) is None

    def test_rejection_is_logged(self, caplog):
        """Test that discarded saves leave a warning behind."""
        with caplog.at_level("WARNING"):
            deserialize_player_state("{oops")

        assert "invalid JSON" in caplog.text

    def test_deeply_nested_json(self):
        """Test that nesting beyond the parser's recursion limit decodes to None."""
        raw = "[" * 200_000 + "]" * 200_000

        assert deserialize_player_state(raw) is None
