import logging

from analyzers.statistics_analyzer import StatisticsAnalyzer
from analyzers.type_inference import TypeInferenceAnalyzer
from models import Table

NULL_PERCENTAGE_TOLERANCE = 5
MAX_NULL_PENALTY = 20


class ProfileAnalyzer:
    """Whole-table profile: column types, statistics and a data quality score"""

    def __init__(self):
        self.type_analyzer = TypeInferenceAnalyzer()
        self.statistics_analyzer = StatisticsAnalyzer(self.type_analyzer)

    def profile(self, table):
        """Profile every column of the table"""
        table = Table(table)
        row_count = len(table)
        quality_score = 100
        columns = []

        for descriptor in self.type_analyzer.analyze(table):
            values = table.column(descriptor.name)
            statistics = self.statistics_analyzer.describe(values, descriptor.inferred_type)
            columns.append({
                'name': descriptor.name,
                'type': descriptor.inferred_type,
                'statistics': statistics.to_dict(),
            })

            # Every column missing more than 5% of its cells costs up to 20 points
            null_percentage = statistics.null_count / row_count * 100
            if null_percentage > NULL_PERCENTAGE_TOLERANCE:
                quality_score -= min(MAX_NULL_PENALTY, null_percentage)

        quality_score = max(0, round(quality_score))
        logging.info(f"[Profile] {row_count} rows, {len(columns)} columns, quality score {quality_score}")

        return {
            'columns': columns,
            'rowCount': row_count,
            'columnCount': len(columns),
            'qualityScore': quality_score,
        }
