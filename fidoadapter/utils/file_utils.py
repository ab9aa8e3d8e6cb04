"""
File utility functions for fidoadapter.
"""

import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from fidoadapter.utils.logger import get_logger

logger = get_logger(__name__)


def validate_file(file_path: Union[str, Path]) -> bool:
    """Validate that the file exists and is not empty."""
    if not Path(file_path).exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    if Path(file_path).stat().st_size == 0:
        raise ValueError(f"File {file_path} is empty")
    return True


@contextmanager
def scoped_temp_dir(prefix: str = "fido_", keep: bool = False) -> Iterator[Path]:
    """
    Temporary directory that is removed on exit unless ``keep`` is set.

    :param prefix: directory name prefix
    :param keep: leave the directory (and its files) in place for inspection
    """
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix))
    logger.debug(f"Created temporary directory {temp_dir}")
    try:
        yield temp_dir
    finally:
        if not keep:
            logger.info("Removing temporary files...")
            shutil.rmtree(temp_dir, ignore_errors=True)
