from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from exceptions import InvalidInputError
from utils.cell_values import is_empty, is_numeric_scalar, to_number

NUMBER = 'number'
DATE = 'date'
TEXT = 'text'
EMPTY = 'empty'

COLUMN_TYPES = (NUMBER, DATE, TEXT)


def make_json_serializable(obj):
    """Convert numpy types and other non-serializable objects to JSON-compatible types"""
    if hasattr(obj, 'to_dict') and not isinstance(obj, (pd.Series, pd.DataFrame)):
        return make_json_serializable(obj.to_dict())
    elif isinstance(obj, dict):
        return {str(key) if not isinstance(key, (str, int, float)) else key: make_json_serializable(value)
                for key, value in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_json_serializable(item) for item in obj]
    elif isinstance(obj, (np.bool_, bool)):
        return bool(obj)
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, (np.floating, float)):
        value = float(obj)
        return value if np.isfinite(value) else None
    elif isinstance(obj, np.ndarray):
        return make_json_serializable(obj.tolist())
    elif isinstance(obj, (datetime, date)):
        return obj.isoformat()
    elif is_empty(obj):
        return None
    return obj


@dataclass(frozen=True)
class CellValue:
    """Tagged cell: number, date, text or empty, with the raw value kept"""
    kind: str
    raw: Any = None

    @classmethod
    def of(cls, raw):
        if isinstance(raw, CellValue):
            return raw
        if is_empty(raw):
            return cls(EMPTY, None)
        if is_numeric_scalar(raw):
            return cls(NUMBER, raw)
        if isinstance(raw, (datetime, date)):
            return cls(DATE, raw)
        return cls(TEXT, raw)

    @property
    def is_empty(self):
        return self.kind == EMPTY

    def as_number(self):
        """Numeric reading of the cell, None when it does not coerce"""
        if self.kind in (NUMBER, TEXT):
            return to_number(self.raw)
        return None

    def as_text(self):
        return '' if self.kind == EMPTY else str(self.raw)


class Table:
    """Ordered rows sharing one set of column names.

    Column order follows the first row, with columns first seen in later rows
    appended. Cells missing from a row are stored as None.
    """

    def __init__(self, rows):
        if isinstance(rows, Table):
            rows = rows.rows
        if rows is None:
            raise InvalidInputError("No data provided for analysis")

        rows = list(rows)
        if not rows:
            raise InvalidInputError("No data provided for analysis")

        columns = []
        seen = set()
        for index, row in enumerate(rows):
            if not isinstance(row, dict):
                raise InvalidInputError(f"Row {index} is not a mapping of column name to value")
            for name, value in row.items():
                if isinstance(value, (list, tuple, dict, set)):
                    raise InvalidInputError(
                        f"Cell '{name}' in row {index} must be a number, text, date or empty"
                    )
                if name not in seen:
                    seen.add(name)
                    columns.append(name)

        if not columns:
            raise InvalidInputError("Table has no columns")

        self._columns = columns
        self._rows = [{name: row.get(name) for name in columns} for row in rows]

    @classmethod
    def from_dataframe(cls, df):
        """Build a table from a DataFrame, turning NaN/NA cells into None"""
        df = df.astype(object).where(df.notna(), None)
        df.columns = [str(col) for col in df.columns]
        return cls(df.to_dict('records'))

    @property
    def columns(self):
        return list(self._columns)

    @property
    def rows(self):
        return self._rows

    def __len__(self):
        return len(self._rows)

    def __iter__(self):
        return iter(self._rows)

    def has_column(self, name):
        return name in self._columns

    def require_columns(self, names):
        """Raise InvalidInputError for any name that is not a column"""
        for name in names:
            if name is None or name == '':
                raise InvalidInputError("Column name is required")
            if name not in self._columns:
                raise InvalidInputError(f"Unknown column: {name}")

    def column(self, name):
        """Values of one column, in row order"""
        self.require_columns([name])
        return [row[name] for row in self._rows]


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    inferred_type: str

    def to_dict(self):
        return {'name': self.name, 'inferredType': self.inferred_type}


@dataclass
class ColumnStatistics:
    column_type: str
    null_count: int = 0
    unique_count: int = 0
    min: Any = None
    max: Any = None
    mean: Optional[float] = None
    median: Optional[float] = None
    mode: Optional[float] = None
    standard_deviation: Optional[float] = None
    quartiles: Optional[Dict[str, float]] = None
    outliers: List[float] = field(default_factory=list)
    unique_values: Optional[int] = None
    most_common: List[Tuple[Any, int]] = field(default_factory=list)

    def to_dict(self):
        result = {
            'type': self.column_type,
            'nullCount': self.null_count,
            'uniqueCount': self.unique_count,
        }

        if self.column_type == NUMBER:
            result.update({
                'min': self.min,
                'max': self.max,
                'mean': self.mean,
                'median': self.median,
                'mode': self.mode,
                'standardDeviation': self.standard_deviation,
                'quartiles': dict(self.quartiles or {}),
                'outliers': list(self.outliers),
            })
        elif self.column_type == DATE:
            result.update({'min': self.min, 'max': self.max})
        else:
            result.update({
                'uniqueValues': self.unique_values,
                'mostCommon': [[value, count] for value, count in self.most_common],
            })

        return make_json_serializable(result)


class CorrelationMatrix:
    """Square column x column mapping of Pearson coefficients"""

    def __init__(self, columns, values):
        self._columns = list(columns)
        self._values = {row: dict(values[row]) for row in self._columns}

    @classmethod
    def from_dict(cls, mapping):
        if isinstance(mapping, CorrelationMatrix):
            return mapping
        return cls(list(mapping.keys()), mapping)

    @property
    def columns(self):
        return list(self._columns)

    def __getitem__(self, column):
        return self._values[column]

    def coefficient(self, first, second):
        return self._values[first][second]

    def strong_pairs(self, threshold):
        """Unordered pairs (a, b, r) with a < b and |r| above threshold"""
        pairs = []
        for first, row in self._values.items():
            for second, value in row.items():
                if value is None:
                    continue
                if str(first) < str(second) and abs(value) > threshold:
                    pairs.append((first, second, value))
        return pairs

    def to_dict(self):
        return make_json_serializable({row: dict(self._values[row]) for row in self._columns})


@dataclass
class RegressionResult:
    coefficients: List[float]
    intercept: float
    r_squared: float
    adjusted_r_squared: float
    predictions: List[float]
    dependent: Optional[str] = None
    independents: List[str] = field(default_factory=list)

    def to_dict(self):
        return make_json_serializable({
            'dependentVariable': self.dependent,
            'independentVariables': list(self.independents),
            'coefficients': list(self.coefficients),
            'intercept': self.intercept,
            'rSquared': self.r_squared,
            'adjustedRSquared': self.adjusted_r_squared,
            'predictions': list(self.predictions),
        })


@dataclass(frozen=True)
class ChartSeries:
    """Chart-ready data: labels/values for categorical charts, points otherwise"""
    chart_type: str
    label: str
    labels: Optional[Tuple[Any, ...]] = None
    values: Optional[Tuple[float, ...]] = None
    points: Optional[Tuple[Tuple[Any, ...], ...]] = None

    @property
    def is_categorical(self):
        return self.points is None

    @classmethod
    def from_dict(cls, mapping):
        if isinstance(mapping, ChartSeries):
            return mapping
        points = mapping.get('points')
        if points is not None:
            points = tuple(
                tuple(point[axis] for axis in ('x', 'y', 'z') if axis in point) if isinstance(point, dict)
                else tuple(point)
                for point in points
            )
        labels = mapping.get('labels')
        values = mapping.get('values')
        return cls(
            chart_type=mapping.get('chartType') or mapping.get('type') or '',
            label=mapping.get('label') or '',
            labels=tuple(labels) if labels is not None else None,
            values=tuple(values) if values is not None else None,
            points=points,
        )

    def to_dict(self):
        result = {'chartType': self.chart_type, 'label': self.label}
        if self.is_categorical:
            result['labels'] = list(self.labels or ())
            result['values'] = list(self.values or ())
        else:
            result['points'] = [dict(zip(('x', 'y', 'z'), point)) for point in self.points]
        return make_json_serializable(result)


@dataclass(frozen=True)
class Insight:
    kind: str
    text: str
    confidence: Optional[float] = None

    def to_dict(self):
        result = {'kind': self.kind, 'text': self.text}
        if self.confidence is not None:
            result['confidence'] = float(self.confidence)
        return result
