"""Loading of experiment blocks from the data directory."""

from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .exceptions import StorageError
from .metrics.models import Block
from .paths import get_block_path, get_blocks_dir
from .storage import read_json


def load_block(data_dir: Path, experiment: str, block_id: str) -> Optional[Block]:
    """Load one block, or None if it does not exist."""
    path = get_block_path(data_dir, experiment, block_id)
    document = read_json(path)
    if document is None:
        return None
    try:
        return Block.model_validate(document)
    except ValidationError as e:
        raise StorageError.from_exception(f"Invalid block file: {path}", e)


def list_blocks(data_dir: Path, experiment: str) -> List[Block]:
    """All blocks of an experiment, most recently started first."""
    blocks_dir = get_blocks_dir(data_dir, experiment)
    if not blocks_dir.is_dir():
        return []

    blocks = []
    for path in sorted(blocks_dir.glob("*.json")):
        block = load_block(data_dir, experiment, path.stem)
        if block is not None:
            blocks.append(block)

    return sorted(blocks, key=lambda b: b.start_date, reverse=True)


def get_current_block(data_dir: Path, experiment: str) -> Optional[Block]:
    """The active (not yet ended) block, if any."""
    for block in list_blocks(data_dir, experiment):
        if block.is_active:
            return block
    return None
