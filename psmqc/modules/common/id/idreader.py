"""
Abstract base class for reading identification (PSM) files
"""

from abc import ABC, abstractmethod
import os
from typing import Iterator

from psmqc.logging import get_logger
from psmqc.modules.psm.models import PSMRow

log = get_logger("psmqc.modules.common.id.idreader")


class IDReader(ABC):
    """Abstract base class for readers that deliver PSMRow records"""

    def __init__(self, file_paths=None):
        """
        Initialize the ID reader with common attributes

        Args:
            file_paths: List of file paths to read data from
        """
        self.logger = log
        self.file_paths = file_paths or []

    @abstractmethod
    def read(self, *args, **kwargs) -> Iterator[PSMRow]:
        """
        Read the identification files.

        Rows whose score rank is larger than 1 must not be returned.

        Returns:
            Iterator[PSMRow]: PSMs in file order
        """
        raise NotImplementedError("Subclasses must implement the read method")

    def _validate_paths(self, paths) -> None:
        """
        Validate if all provided paths exist.

        Raises:
            FileNotFoundError: If any path doesn't exist
        """
        for path in paths:
            if not os.path.exists(path):
                self.logger.error(f"File not found: {path}")
                raise FileNotFoundError(f"File not found: {path}")
