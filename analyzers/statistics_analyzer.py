import logging
import math

import numpy as np
from scipy import stats

from analyzers.type_inference import TypeInferenceAnalyzer
from exceptions import DegenerateComputationError, EmptyColumnError, InvalidInputError
from models import COLUMN_TYPES, ColumnStatistics, DATE, NUMBER, Table
from utils.cell_values import non_empty, parse_date, to_number

MOST_COMMON_LIMIT = 5
IQR_FENCE = 1.5


def numeric_values(values):
    """Numbers of a column in input order; cells that do not coerce are dropped"""
    numbers = []
    for value in values:
        number = to_number(value)
        if number is not None:
            numbers.append(number)
    return numbers


def median(numbers):
    """Middle of the sorted values, or the mean of the two middles for even counts"""
    if not numbers:
        raise EmptyColumnError(NUMBER, "Median of an empty sequence is undefined")

    ordered = sorted(numbers)
    middle = len(ordered) // 2

    if len(ordered) % 2 == 0:
        return (ordered[middle - 1] + ordered[middle]) / 2
    return ordered[middle]


def quartiles(numbers):
    """Quartiles by median of halves.

    For odd counts both halves include the middle value, so [1, 2, 3, 4, 100]
    gives Q1=2, Q2=3, Q3=4.
    """
    if not numbers:
        raise EmptyColumnError(NUMBER, "Quartiles of an empty sequence are undefined")

    ordered = sorted(numbers)
    count = len(ordered)
    lower = ordered[:math.ceil(count / 2)]
    upper = ordered[count // 2:]

    return {
        'Q1': median(lower),
        'Q2': median(ordered),
        'Q3': median(upper),
    }


def detect_outliers(numbers):
    """Values outside [Q1 - 1.5*IQR, Q3 + 1.5*IQR], in input order"""
    if not numbers:
        return []

    q = quartiles(numbers)
    iqr = q['Q3'] - q['Q1']
    lower_bound = q['Q1'] - IQR_FENCE * iqr
    upper_bound = q['Q3'] + IQR_FENCE * iqr

    return [number for number in numbers if number < lower_bound or number > upper_bound]


def mode(values):
    """Most frequent value; the first one seen wins ties"""
    counts = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1

    best_value = None
    best_count = 0
    for value, count in counts.items():
        if count > best_count:
            best_value, best_count = value, count
    return best_value


def standard_deviation(numbers):
    """Population standard deviation"""
    if not numbers:
        raise EmptyColumnError(NUMBER, "Standard deviation of an empty sequence is undefined")
    return float(np.std(np.asarray(numbers, dtype=float)))


def skewness(numbers):
    """Mean of cubed z-scores (population moments)"""
    if not numbers:
        raise EmptyColumnError(NUMBER, "Skewness of an empty sequence is undefined")
    if standard_deviation(numbers) == 0:
        raise DegenerateComputationError("Skewness is undefined for a constant column")
    return float(stats.skew(np.asarray(numbers, dtype=float), bias=True))


def most_common(values, limit=MOST_COMMON_LIMIT):
    """Top (value, count) pairs by descending count, ties in first-seen order"""
    counts = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1

    # sorted() is stable, so equal counts keep first-seen order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return ranked[:limit]


class StatisticsAnalyzer:
    """Analyzer for per-column descriptive statistics"""

    def __init__(self, type_analyzer=None):
        self.type_analyzer = type_analyzer or TypeInferenceAnalyzer()

    def analyze(self, table, columns=None):
        """Describe the requested columns (all columns by default)"""
        table = Table(table)
        columns = table.columns if columns is None else list(columns)
        if not columns:
            raise InvalidInputError("At least one column is required")
        table.require_columns(columns)

        results = {}
        for column in columns:
            values = table.column(column)
            column_type = self.type_analyzer.infer_type(values)
            results[column] = self.describe(values, column_type)
            logging.debug(f"Statistics for '{column}' ({column_type}): nulls={results[column].null_count}")

        return results

    def describe(self, values, column_type):
        """Summarize one column according to its inferred type"""
        if column_type not in COLUMN_TYPES:
            raise InvalidInputError(f"Unsupported column type: {column_type}")

        values = list(values)
        present = non_empty(values)
        result = ColumnStatistics(
            column_type=column_type,
            null_count=len(values) - len(present),
            unique_count=len(set(present)),
        )

        if column_type == NUMBER:
            self._describe_numbers(present, result)
        elif column_type == DATE:
            self._describe_dates(present, result)
        else:
            self._describe_text(present, result)

        return result

    def _describe_numbers(self, present, result):
        numbers = numeric_values(present)
        if not numbers:
            raise EmptyColumnError(NUMBER)

        result.min = min(numbers)
        result.max = max(numbers)
        result.mean = sum(numbers) / len(numbers)
        result.median = median(numbers)
        result.mode = mode(numbers)
        result.standard_deviation = standard_deviation(numbers)
        result.quartiles = quartiles(numbers)
        result.outliers = detect_outliers(numbers)

    def _describe_dates(self, present, result):
        dates = [parsed for parsed in (parse_date(value) for value in present) if parsed is not None]
        if not dates:
            raise EmptyColumnError(DATE)

        result.min = min(dates)
        result.max = max(dates)

    def _describe_text(self, present, result):
        result.unique_values = result.unique_count
        result.most_common = most_common(present)
