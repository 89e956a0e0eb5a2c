import logging

from exceptions import InvalidInputError
from models import ChartSeries, CellValue, DATE, Table
from utils.cell_values import parse_date

CATEGORICAL_CHARTS = ('bar', 'line', 'area', 'pie')
POINT_CHARTS = ('scatter',)
CHART_3D = ('3d-bar', '3d-scatter', '3d-surface')
CHART_TYPES = CATEGORICAL_CHARTS + POINT_CHARTS + CHART_3D

AGGREGATIONS = ('sum', 'average', 'count', 'min', 'max')
FILTER_OPERATORS = ('equals', 'not_equals', 'greater_than', 'less_than', 'contains', 'not_contains')


class ChartDataBuilder:
    """Builds chart-ready series from a table and a chart configuration"""

    def build_chart(self, table, chart_config):
        """Dispatch on chart type and return the series for it"""
        table = Table(table)
        if not isinstance(chart_config, dict):
            raise InvalidInputError("Chart configuration must be an object")

        chart_type = chart_config.get('type')
        if chart_type not in CHART_TYPES:
            raise InvalidInputError(f"Unsupported chart type: {chart_type}")

        x_column, x_label = self._axis(chart_config, 'xAxis')
        y_column, y_label = self._axis(chart_config, 'yAxis')
        filters = chart_config.get('filters') or []

        if chart_type in CATEGORICAL_CHARTS:
            # Pie slices are always summed
            aggregation = 'sum' if chart_type == 'pie' else (chart_config.get('aggregation') or 'sum')
            return self.aggregate(table, x_column, y_column, aggregation, filters,
                                  chart_type=chart_type, label=y_label)

        if chart_type in POINT_CHARTS:
            return self.points(table, [x_column, y_column], filters,
                               chart_type=chart_type, label=f"{x_label} vs {y_label}")

        z_column, z_label = self._axis(chart_config, 'zAxis')
        return self.points(table, [x_column, y_column, z_column], filters,
                           chart_type=chart_type, label=f"{x_label} vs {y_label} vs {z_label}")

    def aggregate(self, table, group_by, value_column, aggregation, filters=(), chart_type='bar', label=None):
        """Group rows by the raw group-by value and reduce the value column.

        Values that do not coerce to numbers count as 0.
        """
        table = Table(table)
        if aggregation not in AGGREGATIONS:
            raise InvalidInputError(f"Unsupported aggregation: {aggregation}")
        table.require_columns([group_by, value_column])

        groups = {}
        for row in self.apply_filters(table, filters):
            key = row[group_by]
            value = CellValue.of(row[value_column]).as_number() or 0

            group = groups.get(key)
            if group is None:
                group = groups[key] = {'sum': 0, 'count': 0, 'min': value, 'max': value}

            group['sum'] += value
            group['count'] += 1
            group['min'] = min(group['min'], value)
            group['max'] = max(group['max'], value)

        labels = tuple(groups.keys())
        values = tuple(self._reduce(group, aggregation) for group in groups.values())

        logging.debug(f"[Chart] {chart_type}: {len(labels)} groups of '{group_by}' by {aggregation}({value_column})")
        return ChartSeries(chart_type=chart_type, label=label or value_column,
                           labels=labels, values=values)

    def points(self, table, columns, filters=(), chart_type='scatter', label=None):
        """One (x, y[, z]) tuple of raw values per surviving row"""
        table = Table(table)
        table.require_columns(columns)

        points = tuple(
            tuple(row[column] for column in columns)
            for row in self.apply_filters(table, filters)
        )
        return ChartSeries(chart_type=chart_type, label=label or ' vs '.join(columns), points=points)

    def apply_filters(self, table, filters):
        """Rows satisfying every filter, in order"""
        table = Table(table)
        filters = list(filters or [])
        for condition in filters:
            self._validate_filter(table, condition)

        if not filters:
            return list(table.rows)

        return [row for row in table.rows if all(self._matches(row, condition) for condition in filters)]

    def _validate_filter(self, table, condition):
        if not isinstance(condition, dict):
            raise InvalidInputError("Filter must be an object with column, operator and value")
        if condition.get('operator') not in FILTER_OPERATORS:
            raise InvalidInputError(f"Unsupported filter operator: {condition.get('operator')}")
        table.require_columns([condition.get('column')])

    def _matches(self, row, condition):
        actual = CellValue.of(row[condition['column']])
        expected = CellValue.of(condition.get('value'))
        operator = condition['operator']

        if operator == 'equals':
            return self._same(actual, expected)
        elif operator == 'not_equals':
            return not self._same(actual, expected)
        elif operator == 'greater_than':
            ordered = self._comparable(actual, expected)
            return ordered is not None and ordered[0] > ordered[1]
        elif operator == 'less_than':
            ordered = self._comparable(actual, expected)
            return ordered is not None and ordered[0] < ordered[1]
        elif operator == 'contains':
            return expected.as_text() in actual.as_text()
        else:
            return expected.as_text() not in actual.as_text()

    def _same(self, actual, expected):
        """Equal raw value of the same kind, so "5" and 5 differ"""
        return actual.kind == expected.kind and actual.raw == expected.raw

    def _comparable(self, actual, expected):
        """A pair that can be ordered, or None when the kinds do not compare"""
        if DATE in (actual.kind, expected.kind):
            left, right = parse_date(actual.raw), parse_date(expected.raw)
            return (left, right) if left is not None and right is not None else None

        left, right = actual.as_number(), expected.as_number()
        if left is not None and right is not None:
            return left, right

        if isinstance(actual.raw, str) and isinstance(expected.raw, str):
            return actual.raw, expected.raw

        return None

    def _reduce(self, group, aggregation):
        if aggregation == 'sum':
            return group['sum']
        elif aggregation == 'average':
            return group['sum'] / group['count']
        elif aggregation == 'count':
            return group['count']
        elif aggregation == 'min':
            return group['min']
        return group['max']

    def _axis(self, chart_config, name):
        """(column, label) from an axis given as {column, label} or a bare column name"""
        axis = chart_config.get(name)
        if isinstance(axis, str):
            axis = {'column': axis}
        if not isinstance(axis, dict) or not axis.get('column'):
            raise InvalidInputError(f"Chart configuration is missing {name}.column")
        return axis['column'], axis.get('label') or axis['column']
