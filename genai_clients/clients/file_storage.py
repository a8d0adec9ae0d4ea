"""
Local image storage

Writes generated or downloaded image bytes into the configured output
directory using the image_<timestamp>_<index>.png naming scheme.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def generation_timestamp(now: Optional[datetime] = None) -> str:
    """Timestamp shared by every file of one generation run"""
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def image_filename(timestamp: str, index: int) -> str:
    return f"image_{timestamp}_{index}.png"


class ImageWriter:
    """
    Writes the files of one generation run.

    Every file shares one timestamp and gets the next index. Files are
    created exclusively, so a name already taken by another run in the
    same second is skipped instead of overwritten.
    """

    def __init__(self, output_dir: Union[str, Path], now: Optional[datetime] = None):
        self.directory = Path(output_dir)
        self.timestamp = generation_timestamp(now)
        self._next_index = 0

    def write(self, data: bytes) -> Path:
        """
        Write image bytes under the next free index.

        Returns:
            Path of the written file

        Raises:
            OSError: If the directory or file cannot be written
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        while True:
            file_path = self.directory / image_filename(self.timestamp, self._next_index)
            self._next_index += 1
            try:
                with open(file_path, "xb") as f:
                    f.write(data)
            except FileExistsError:
                continue
            logger.debug(f"Wrote {len(data)} bytes to {file_path}")
            return file_path
