import logging

from analyzers.statistics_analyzer import detect_outliers, numeric_values, skewness
from analyzers.type_inference import TypeInferenceAnalyzer
from exceptions import DegenerateComputationError
from models import ChartSeries, CorrelationMatrix, Insight, NUMBER, Table

STABLE_TREND_PERCENT = 5
STRONG_CORRELATION = 0.7
STRONG_SKEW = 1


class DataInsights:
    """Rule-based observations drawn from a table and its analysis results"""

    @staticmethod
    def generate_insights(table, prior_results=None):
        """Trend, correlation, distribution and outlier insights, in that order.

        prior_results may hold a 'chart' (ChartSeries or its dict form) and
        'correlations' (CorrelationMatrix or a nested dict).
        """
        table = Table(table)
        prior_results = prior_results or {}
        insights = []

        chart = prior_results.get('chart')
        if chart is not None:
            trend = DataInsights.analyze_trend(ChartSeries.from_dict(chart))
            if trend is not None:
                insights.append(trend)

        correlations = prior_results.get('correlations')
        if correlations:
            insights.extend(DataInsights.analyze_correlations(CorrelationMatrix.from_dict(correlations)))

        numeric_columns = DataInsights.numeric_columns(table)
        insights.extend(DataInsights.analyze_distributions(table, numeric_columns))
        insights.extend(DataInsights.analyze_outliers(table, numeric_columns))

        logging.info(f"[Insights] Generated {len(insights)} insights")
        return insights

    @staticmethod
    def numeric_columns(table):
        analyzer = TypeInferenceAnalyzer()
        return [d.name for d in analyzer.analyze(table) if d.inferred_type == NUMBER]

    @staticmethod
    def analyze_trend(chart):
        """Compare the last and first values of a line chart"""
        if chart.chart_type != 'line' or not chart.is_categorical or not chart.values:
            return None

        first_value = chart.values[0]
        last_value = chart.values[-1]

        if first_value == 0:
            if last_value == 0:
                return Insight('trend', 'The trend appears to be relatively stable.')
            # No percentage against a zero baseline
            if last_value > 0:
                return Insight('trend', 'There is an upward trend from a zero baseline.')
            return Insight('trend', 'There is a downward trend from a zero baseline.')

        change = (last_value - first_value) / abs(first_value) * 100

        if abs(change) < STABLE_TREND_PERCENT:
            return Insight('trend', 'The trend appears to be relatively stable.')
        elif change > 0:
            return Insight('trend', f'There is an upward trend with a {change:.1f}% increase.')
        return Insight('trend', f'There is a downward trend with a {abs(change):.1f}% decrease.')

    @staticmethod
    def analyze_correlations(matrix):
        """One insight per strongly correlated pair"""
        insights = []
        for first, second, value in matrix.strong_pairs(STRONG_CORRELATION):
            direction = 'positive' if value > 0 else 'negative'
            insights.append(Insight(
                'correlation',
                f'Strong {direction} correlation ({value:.2f}) between {first} and {second}.',
                confidence=abs(value),
            ))
        return insights

    @staticmethod
    def analyze_distributions(table, numeric_columns):
        """Flag numeric columns with strong skew"""
        insights = []
        for column in numeric_columns:
            numbers = numeric_values(table.column(column))
            try:
                column_skew = skewness(numbers)
            except DegenerateComputationError as e:
                logging.debug(f"Skipping skew check for '{column}': {e}")
                continue

            if column_skew > STRONG_SKEW:
                insights.append(Insight('distribution', f'{column} shows a strong positive skew.'))
            elif column_skew < -STRONG_SKEW:
                insights.append(Insight('distribution', f'{column} shows a strong negative skew.'))
        return insights

    @staticmethod
    def analyze_outliers(table, numeric_columns):
        """Report IQR outlier counts per numeric column"""
        insights = []
        for column in numeric_columns:
            numbers = numeric_values(table.column(column))
            outliers = detect_outliers(numbers)
            if outliers:
                percentage = len(outliers) / len(numbers) * 100
                insights.append(Insight(
                    'outlier',
                    f'{column} has {len(outliers)} outliers, which is {percentage:.1f}% of the data.',
                ))
        return insights
