"""Path layout of the devex data directory.

Everything lives under ``~/.config/devex`` unless ``DEVEX_DATA_DIR`` says
otherwise::

    config.json
    experiments/<experiment>/blocks/<block-id>.json
    experiments/<experiment>/metrics/<block-id>.json
"""

from pathlib import Path
from typing import Optional

from .core.constants import CONFIG_FILE_NAME


def get_data_dir(override: Optional[Path] = None) -> Path:
    """Resolve the data directory, honouring an explicit override."""
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "devex"


def get_config_path(data_dir: Path) -> Path:
    return data_dir / CONFIG_FILE_NAME


def get_experiment_dir(data_dir: Path, experiment: str) -> Path:
    return data_dir / "experiments" / experiment


def get_blocks_dir(data_dir: Path, experiment: str) -> Path:
    return get_experiment_dir(data_dir, experiment) / "blocks"


def get_block_path(data_dir: Path, experiment: str, block_id: str) -> Path:
    return get_blocks_dir(data_dir, experiment) / f"{block_id}.json"


def get_metrics_dir(data_dir: Path, experiment: str) -> Path:
    return get_experiment_dir(data_dir, experiment) / "metrics"


def get_metrics_path(data_dir: Path, experiment: str, block_id: str) -> Path:
    """Location of the cached GitMetrics document for a block."""
    return get_metrics_dir(data_dir, experiment) / f"{block_id}.json"
