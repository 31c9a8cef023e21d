"""JSON save codec for player state."""

from idlefinance.modules.persistence.serializer import (
    deserialize_player_state,
    serialize_player_state,
)

__all__ = ["serialize_player_state", "deserialize_player_state"]
