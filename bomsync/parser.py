import logging
from typing import List, Optional

from .adapters import CsvAdapter, ExcelAdapter
from .classifier import ColumnRoleClassifier
from .dataset import TabularDataset

logger = logging.getLogger(__name__)


class BomParser:
    """Reads BOM files through registered adapters and classifies them."""

    def __init__(self, classifier: Optional[ColumnRoleClassifier] = None, default_adapters: bool = True):
        """Initialize the BOM parser.

        Args:
            classifier: Classifier used by parse() (default configuration when omitted)
            default_adapters: Register the CSV/TSV and XLSX adapters (default: True)
        """
        self.adapters = []
        self.classifier = classifier or ColumnRoleClassifier()
        if default_adapters:
            self.register_adapter(CsvAdapter())
            self.register_adapter(ExcelAdapter())

    def register_adapter(self, adapter):
        """Register a file adapter.

        Args:
            adapter: Adapter instance with can_handle() and read() methods.
                Adapters registered later are tried after earlier ones.
        """
        self.adapters.append(adapter)

    def _find_adapter(self, file_path: str):
        for adapter in self.adapters:
            if adapter.can_handle(file_path):
                return adapter
        raise ValueError(f"No adapter found for {file_path}")

    def read_raw(self, file_path: str) -> List[List[str]]:
        """Decode a file into raw rows without classifying it.

        Raises:
            ValueError: If no adapter handles the file
        """
        adapter = self._find_adapter(str(file_path))
        logger.debug(f"Reading {file_path} with {type(adapter).__name__}")
        return adapter.read(str(file_path))

    def parse(self, file_path: str) -> TabularDataset:
        """Decode and classify a BOM file.

        Args:
            file_path: Path to the BOM file

        Returns:
            Classified TabularDataset

        Raises:
            ValueError: If no adapter handles the file, or the file holds no
                non-blank row
            FileNotFoundError: If the file doesn't exist
        """
        raw_rows = self.read_raw(file_path)
        logger.info(f"Read {len(raw_rows)} raw rows from {file_path}")
        return self.classifier.classify(raw_rows)
