import logging

import pandas as pd

from exceptions import InvalidInputError
from .file_parser import BaseParser


class CSVParser(BaseParser):
    """Parser for CSV files"""

    encodings = ['utf-8', 'latin-1', 'cp1252', 'iso-8859-1']
    separators = [',', ';', '\t', '|']

    def read_dataframe(self, content):
        """Try different encodings and separators until the file splits into columns"""
        for encoding in self.encodings:
            for sep in self.separators:
                try:
                    df = pd.read_csv(self._stream(content), encoding=encoding, sep=sep)
                except (UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError):
                    continue

                if len(df.columns) > 1:
                    logging.info(f"Successfully parsed CSV with encoding={encoding}, separator='{sep}'")
                    return df

        # Single-column files land here
        try:
            return pd.read_csv(self._stream(content))
        except (UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            logging.error(f"Error parsing CSV file: {str(e)}")
            raise InvalidInputError(f"Failed to parse CSV file: {str(e)}") from e
