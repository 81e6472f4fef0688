"""Reading and writing the JSON files behind matches, packets, rosters and settings."""

import json
import logging
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('qbscore.utils')


def load_json(path: Path | str, schema: type[T]) -> T:
    """
    Read a JSON file into one of the qbscore.schemas models.

    Every failure is logged before it is raised, so a CLI run leaves a
    trace of which file was bad.

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file isn't JSON (message names the file)
        ValueError: If the JSON doesn't fit ``schema``; wraps pydantic's
            ValidationError

    Example:
        from qbscore.schemas import PacketSchema
        packet = load_json('packets/round_3.json', schema=PacketSchema)
    """
    path = Path(path)
    logger.debug(f'Loading {schema.__name__} from {path}')

    if not path.exists():
        logger.error(f'File not found: {path}')
        raise FileNotFoundError(f'File not found: {path}')

    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f'Invalid JSON in {path}: {e.msg} at position {e.pos}')
        raise json.JSONDecodeError(f'Invalid JSON in {path}: {e.msg}', e.doc, e.pos) from e

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        logger.error(f'{path} is not a valid {schema.__name__}: {e}')
        raise ValueError(f'Schema validation failed for {path}:\n{e}') from e


def save_json(path: Path | str, model: BaseModel) -> None:
    """
    Write a schema model as indented UTF-8 JSON, creating parent directories.

    Raises:
        OSError: If the file can't be written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(model.model_dump(mode='json'), f, indent=2, ensure_ascii=False)
    except OSError as e:
        logger.error(f'Failed to write {path}: {e}')
        raise

    logger.debug(f'Wrote {type(model).__name__} to {path}')
