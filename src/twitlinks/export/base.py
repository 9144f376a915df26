"""Base class for exporters."""
from abc import ABC, abstractmethod
from pathlib import Path

from ..models import TweetTables

class Exporter(ABC):
    """Base class for output writers."""

    suffix: str = ''

    def __init__(self, truncate: bool = False):
        self.truncate = truncate

    def output_path_for(self, input_path: Path) -> Path:
        """Output file written next to an input export."""
        return Path(input_path).with_suffix(self.suffix)

    @abstractmethod
    def export(self, tables: TweetTables, output_path: Path) -> None:
        """Write the tables to ``output_path``."""
        pass
