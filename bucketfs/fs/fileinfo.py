# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
from dataclasses import dataclass
from datetime import datetime, timezone

EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)

FILE_MODE = 0o664
DIR_MODE = 0o755

@dataclass(frozen=True)
class FileInfo:
    """
    Metadata of a file or directory.

    The mode is fixed (0664 for files, 0755 for directories) and does not
    reflect the object's ACL.

    Attributes:
        name (str): Base name
        size (int): Size in bytes (0 for directories)
        mod_time (datetime): Last modification time
        is_dir (bool): Whether the entry is a directory
    """
    name: str
    size: int = 0
    mod_time: datetime = EPOCH
    is_dir: bool = False

    @property
    def mode(self) -> int:
        return DIR_MODE if self.is_dir else FILE_MODE
