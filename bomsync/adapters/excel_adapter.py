from pathlib import Path
from typing import List

import openpyxl


class ExcelAdapter:
    """Reads the active sheet of an .xlsx workbook into raw rows."""

    def can_handle(self, file_path):
        return Path(file_path).suffix.lower() == ".xlsx"

    def read(self, file_path) -> List[List[str]]:
        wb = openpyxl.load_workbook(file_path, data_only=True, read_only=True)
        try:
            ws = wb.active
            rows = []
            for row in ws.iter_rows(values_only=True):
                rows.append(["" if value is None else str(value) for value in row])
        finally:
            wb.close()
        return rows
