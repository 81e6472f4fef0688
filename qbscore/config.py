"""Scoring settings shipped with the package."""

from functools import lru_cache
from pathlib import Path

from .schemas import MatchConfig
from .utils import load_json

CONFIG_PATH = Path(__file__).parent / 'data' / 'match_config.json'


@lru_cache(maxsize=1)
def get_config() -> MatchConfig:
    """
    Tossup point values and team limit from data/match_config.json.

    Every GameState created without an explicit config shares this object.

    Raises:
        FileNotFoundError: If the packaged file is missing
        ValueError: If the file doesn't match MatchConfig (e.g. a positive
            neg value)
    """
    return load_json(CONFIG_PATH, schema=MatchConfig)


def clear_config_cache() -> None:
    """Forget the loaded settings; the next get_config() rereads the file."""
    get_config.cache_clear()
