import logging

import pandas as pd

from exceptions import InvalidInputError
from .file_parser import BaseParser, NULL_MARKERS


class ExcelParser(BaseParser):
    """Parser for Excel files (.xls and .xlsx)"""

    def read_dataframe(self, content):
        """Read every sheet and keep the one with the most rows"""
        try:
            sheets = pd.read_excel(self._stream(content), sheet_name=None)
        except (ValueError, ImportError, OSError) as e:
            logging.error(f"Error parsing Excel file: {str(e)}")
            raise InvalidInputError(f"Failed to parse Excel file: {str(e)}") from e

        non_empty_sheets = {name: df for name, df in sheets.items() if not df.empty}
        if not non_empty_sheets:
            raise InvalidInputError("Workbook contains no data")

        sheet_name, df = max(non_empty_sheets.items(), key=lambda item: len(item[1]))
        logging.info(f"Using sheet '{sheet_name}' with {len(df)} rows")
        return df

    def _clean_dataframe(self, df, null_markers=None):
        """Clean the sheet and name unnamed columns"""
        df = df.copy()
        # Handle unnamed columns (common in Excel files)
        df.columns = [f'Column_{i}' if str(col).startswith('Unnamed:') else str(col)
                      for i, col in enumerate(df.columns)]

        return super()._clean_dataframe(df, null_markers or NULL_MARKERS + ['N/A', 'n/a'])
