from pathlib import Path
from typing import Optional

from mealadmin.utilities.config import DATA_DIR


def table_file(table: str, data_dir: Optional[Path] = None) -> Path:
    """JSON file holding every row of ``table`` (one file per table)."""
    return Path(data_dir or DATA_DIR) / f"{table}.json"


__all__ = ['DATA_DIR', 'table_file']
