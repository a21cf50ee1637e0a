"""Player name handling and identity lookup."""

from paddlerank.players.identity import find_player
from paddlerank.players.names import compare_names, normalize_name, slugify

__all__ = ["compare_names", "find_player", "normalize_name", "slugify"]
