import logging
import math

from exceptions import InvalidInputError
from models import CorrelationMatrix, Table
from utils.cell_values import to_number

STRONG_CORRELATION = 0.7


class CorrelationAnalyzer:
    """Analyzer for pairwise Pearson correlation between numeric columns"""

    def correlate(self, table, columns):
        """Build the correlation matrix over the given columns"""
        table = Table(table)
        columns = list(dict.fromkeys(columns or []))
        if not columns:
            raise InvalidInputError("At least one column is required for correlation")
        table.require_columns(columns)

        matrix = {column: {} for column in columns}
        for first in columns:
            for second in columns:
                if first == second:
                    matrix[first][second] = 1
                    continue
                xs, ys = self._paired_values(table, first, second)
                matrix[first][second] = self.pearson(xs, ys)

        result = CorrelationMatrix(columns, matrix)
        strong = result.strong_pairs(STRONG_CORRELATION)
        if strong:
            logging.debug(f"[Correlations] {len(strong)} strong pairs among {len(columns)} columns")
        return result

    def _paired_values(self, table, first, second):
        """Rows where both cells are numeric; filtered for this pair only"""
        xs, ys = [], []
        for row in table:
            x = to_number(row[first])
            y = to_number(row[second])
            if x is None or y is None:
                continue
            xs.append(x)
            ys.append(y)
        return xs, ys

    @staticmethod
    def pearson(xs, ys):
        """Pearson r from raw sums; 0 when either side has no variance"""
        if len(set(xs)) < 2 or len(set(ys)) < 2:
            return 0

        n = len(xs)
        sum_x = sum(xs)
        sum_y = sum(ys)
        sum_xy = sum(x * y for x, y in zip(xs, ys))
        sum_x2 = sum(x * x for x in xs)
        sum_y2 = sum(y * y for y in ys)

        numerator = n * sum_xy - sum_x * sum_y
        spread = (n * sum_x2 - sum_x ** 2) * (n * sum_y2 - sum_y ** 2)
        if spread <= 0:
            return 0

        r = numerator / math.sqrt(spread)
        return max(-1.0, min(1.0, r))
