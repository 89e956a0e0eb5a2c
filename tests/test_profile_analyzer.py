import pytest

from analyzers.profile_analyzer import ProfileAnalyzer


class TestProfileAnalyzer:

    @pytest.fixture
    def analyzer(self):
        return ProfileAnalyzer()

    def test_profile_shape(self, analyzer, sales_table):
        profile = analyzer.profile(sales_table)

        assert profile['rowCount'] == 5
        assert profile['columnCount'] == 5
        assert [column['name'] for column in profile['columns']] == sales_table.columns
        assert profile['columns'][2]['type'] == 'number'
        assert profile['columns'][2]['statistics']['mean'] == 30

    def test_each_sparse_column_costs_at_most_twenty_points(self, analyzer, sales_table):
        """status is 20% empty"""
        assert analyzer.profile(sales_table)['qualityScore'] == 80

    def test_small_null_share_is_tolerated(self, analyzer):
        rows = [{'v': i} for i in range(20)] + [{'v': None}]
        assert analyzer.profile(rows)['qualityScore'] == 100

    def test_penalty_is_the_null_percentage_below_the_cap(self, analyzer):
        rows = [{'a': i, 'b': i} for i in range(9)] + [{'a': None, 'b': 1}]
        assert analyzer.profile(rows)['qualityScore'] == 90

    def test_score_never_drops_below_zero(self, analyzer):
        rows = [{f'c{i}': None for i in range(6)}, {f'c{i}': None for i in range(6)}]
        profile = analyzer.profile(rows)

        assert profile['qualityScore'] == 0
        assert all(column['type'] == 'text' for column in profile['columns'])
