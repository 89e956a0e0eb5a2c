import logging

from models import ColumnDescriptor, DATE, NUMBER, TEXT, Table
from utils.cell_values import non_empty, parse_date, to_number


class TypeInferenceAnalyzer:
    """Analyzer for classifying each column as number, date or text"""

    def __init__(self, sample_size=100, threshold=0.8):
        self.sample_size = sample_size
        self.threshold = threshold

    def analyze(self, table):
        """Infer a type for every column of the table, in column order"""
        table = Table(table)
        descriptors = [
            ColumnDescriptor(name=column, inferred_type=self.infer_type(table.column(column)))
            for column in table.columns
        ]

        logging.debug("Type inference: %s",
                      ', '.join(f"{d.name}={d.inferred_type}" for d in descriptors))
        return descriptors

    def infer_type(self, values):
        """Classify a column from the first non-empty values by majority vote"""
        sample = non_empty(values)[:self.sample_size]

        if not sample:
            return TEXT

        number_rate = sum(1 for value in sample if self.is_number(value)) / len(sample)
        if number_rate >= self.threshold:
            return NUMBER

        date_rate = sum(1 for value in sample if self.is_date(value)) / len(sample)
        if date_rate >= self.threshold:
            return DATE

        return TEXT

    def is_number(self, value):
        return to_number(value) is not None

    def is_date(self, value):
        return parse_date(value) is not None
