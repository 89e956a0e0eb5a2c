import io
import logging
from abc import ABC, abstractmethod

import pandas as pd

from exceptions import InvalidInputError
from models import Table

NULL_MARKERS = ['nan', 'NaN', 'NULL', 'null', '']


class BaseParser(ABC):
    """Abstract base class for spreadsheet parsers"""

    @abstractmethod
    def read_dataframe(self, source):
        """Read the source into a pandas DataFrame"""
        pass

    def parse(self, source):
        """Parse a path or binary file object into a Table"""
        df = self._clean_dataframe(self.read_dataframe(self._buffer(source)))
        if df.empty:
            raise InvalidInputError("File contains no data rows")
        logging.info(f"Parsed {len(df)} rows x {len(df.columns)} columns with {type(self).__name__}")
        return Table.from_dataframe(df)

    def _buffer(self, source):
        """Load the whole source into memory so parsing can be retried"""
        if isinstance(source, (bytes, bytearray)):
            return bytes(source)
        if hasattr(source, 'read'):
            return source.read()
        with open(source, 'rb') as f:
            return f.read()

    def _clean_dataframe(self, df, null_markers=None):
        """Clean and standardize the DataFrame"""
        # Remove completely empty rows and columns
        df = df.dropna(how='all').dropna(axis=1, how='all')

        # Strip whitespace from string columns
        for col in df.select_dtypes(include=['object']).columns:
            df[col] = df[col].map(lambda value: value.strip() if isinstance(value, str) else value)

        return df.replace(null_markers or NULL_MARKERS, pd.NA)

    @staticmethod
    def _stream(content):
        return io.BytesIO(content)


class FileParserFactory:
    """Factory class to get appropriate parser for file type"""

    def __init__(self):
        from .csv_parser import CSVParser
        from .excel_parser import ExcelParser

        self.parsers = {
            'csv': CSVParser(),
            'xls': ExcelParser(),
            'xlsx': ExcelParser(),
        }

    def get_parser(self, file_type):
        """Get parser for specific file type"""
        parser = self.parsers.get((file_type or '').lower().lstrip('.'))
        if not parser:
            raise InvalidInputError(f"Unsupported file type: {file_type}")
        return parser

    def parse_upload(self, filename, stream):
        """Parse an uploaded file, choosing the parser by extension"""
        if not filename or '.' not in filename:
            raise InvalidInputError("File name must include an extension")
        return self.get_parser(filename.rsplit('.', 1)[1]).parse(stream)
