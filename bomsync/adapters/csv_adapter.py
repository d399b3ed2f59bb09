import csv
import logging
from pathlib import Path
from typing import List

import chardet

logger = logging.getLogger(__name__)

FALLBACK_ENCODINGS = ["cp1252", "latin-1"]


class CsvAdapter:
    """CSV/TSV decoder producing raw rows.

    Handles:
    - Encodings detected with chardet (a UTF-8 BOM always wins)
    - Comma, semicolon and tab delimiters
    - Ragged rows, which are returned as they are

    No row is interpreted as a header here; the classifier decides.
    """

    def can_handle(self, file_path: str) -> bool:
        return Path(file_path).suffix.lower() in [".csv", ".tsv"]

    def _detect_encoding(self, file_path: str) -> str:
        """Detect file encoding from the first 10KB."""
        with open(file_path, "rb") as f:
            raw_data = f.read(10000)

        if raw_data.startswith(b"\xef\xbb\xbf"):
            return "utf-8-sig"

        encoding = chardet.detect(raw_data).get("encoding") or "utf-8"
        if encoding.lower().replace("-", "") in ("utf8", "ascii"):
            return "utf-8"
        return encoding

    def _detect_delimiter(self, file_path: str, encoding: str) -> str:
        """Pick the delimiter that occurs most often in the first line."""
        if Path(file_path).suffix.lower() == ".tsv":
            return "\t"

        with open(file_path, "r", encoding=encoding, errors="replace", newline="") as f:
            first_line = f.readline()

        counts = {
            ",": first_line.count(","),
            ";": first_line.count(";"),
            "\t": first_line.count("\t"),
        }
        # Ties go to the comma
        delimiter = max(counts, key=lambda d: (counts[d], d == ","))
        return delimiter

    def _read_rows(self, file_path: str, encoding: str, delimiter: str) -> List[List[str]]:
        with open(file_path, "r", encoding=encoding, newline="") as f:
            return [list(row) for row in csv.reader(f, delimiter=delimiter)]

    def read(self, file_path: str) -> List[List[str]]:
        """Read a CSV/TSV file into raw rows.

        Args:
            file_path: Path to the CSV/TSV file

        Returns:
            Every line of the file as a list of cell strings, header included

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the file cannot be decoded or parsed
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        if path.stat().st_size == 0:
            return []

        encoding = self._detect_encoding(file_path)
        delimiter = self._detect_delimiter(file_path, encoding)
        logger.debug(f"Reading {file_path} as {encoding} with delimiter {delimiter!r}")

        try:
            return self._read_rows(file_path, encoding, delimiter)
        except UnicodeDecodeError as e:
            for fallback_encoding in FALLBACK_ENCODINGS:
                try:
                    rows = self._read_rows(file_path, fallback_encoding, delimiter)
                except UnicodeDecodeError:
                    continue
                logger.warning(f"Decoded {file_path} with fallback encoding {fallback_encoding}")
                return rows
            raise ValueError(f"Could not decode file {file_path}: {e}")
        except csv.Error as e:
            raise ValueError(f"Error parsing CSV file {file_path}: {e}")
