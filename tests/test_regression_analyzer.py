import pytest

from analyzers.regression_analyzer import RegressionAnalyzer
from exceptions import DegenerateComputationError, InvalidInputError


class TestRegressionAnalyzer:

    @pytest.fixture
    def analyzer(self):
        return RegressionAnalyzer()

    def test_exact_line_is_recovered(self, analyzer):
        rows = [{'x': x, 'y': 2 * x + 3} for x in [1, 2, 3, 4]]
        result = analyzer.regress(rows, 'y', ['x'])

        assert result.coefficients == [pytest.approx(2)]
        assert result.intercept == pytest.approx(3)
        assert result.r_squared == pytest.approx(1)
        assert result.adjusted_r_squared == pytest.approx(1)
        assert result.predictions == pytest.approx([5, 7, 9, 11])

    def test_two_independent_variables(self, analyzer):
        a = [1, 2, 3, 4, 5, 6]
        b = [2, 1, 4, 3, 6, 5]
        rows = [{'a': ai, 'b': bi, 'y': 1 + 2 * ai + 3 * bi} for ai, bi in zip(a, b)]

        result = analyzer.regress(rows, 'y', ['a', 'b'])

        assert result.coefficients == pytest.approx([2, 3])
        assert result.intercept == pytest.approx(1)
        assert result.r_squared == pytest.approx(1)

    def test_noisy_fit_penalizes_adjusted_r_squared(self, analyzer):
        rows = [{'x': x, 'y': y} for x, y in zip([1, 2, 3, 4, 5, 6], [2, 5, 5, 9, 9, 14])]
        result = analyzer.regress(rows, 'y', ['x'])

        assert 0 < result.r_squared < 1
        assert result.adjusted_r_squared < result.r_squared
        assert len(result.predictions) == len(rows)

    def test_formatted_numbers_are_accepted(self, analyzer):
        rows = [{'x': x, 'y': f"${2 * x + 3:,}"} for x in [1, 2, 3, 4]]
        assert analyzer.regress(rows, 'y', ['x']).intercept == pytest.approx(3)

    def test_too_few_rows(self, analyzer):
        with pytest.raises(DegenerateComputationError):
            analyzer.regress([{'x': 1, 'y': 2}, {'x': 2, 'y': 4}], 'y', ['x'])

    def test_constant_dependent_variable(self, analyzer):
        rows = [{'x': x, 'y': 5} for x in [1, 2, 3, 4]]
        with pytest.raises(DegenerateComputationError, match='constant'):
            analyzer.regress(rows, 'y', ['x'])

    @pytest.mark.parametrize('value', [0.1, 0.7, 1.1, 2.2, 3.3, 9.7])
    def test_constant_fractional_dependent_variable(self, analyzer, value):
        rows = [{'x': x, 'y': value} for x in range(1, 8)]
        with pytest.raises(DegenerateComputationError, match='constant'):
            analyzer.regress(rows, 'y', ['x'])

    def test_collinear_independent_variables(self, analyzer):
        rows = [{'a': a, 'b': 2 * a, 'y': a + 1} for a in [1, 2, 3, 4, 5]]
        with pytest.raises(DegenerateComputationError, match='collinear'):
            analyzer.regress(rows, 'y', ['a', 'b'])

    def test_constant_independent_variable(self, analyzer):
        rows = [{'x': 1, 'y': y} for y in [1, 2, 3, 4]]
        with pytest.raises(DegenerateComputationError):
            analyzer.regress(rows, 'y', ['x'])

    def test_non_numeric_cell_is_rejected(self, analyzer):
        rows = [{'x': 1, 'y': 2}, {'x': 'two', 'y': 4}, {'x': 3, 'y': 6}, {'x': 4, 'y': 8}]
        with pytest.raises(InvalidInputError, match="'x'"):
            analyzer.regress(rows, 'y', ['x'])

    def test_missing_cell_is_rejected(self, analyzer):
        rows = [{'x': 1, 'y': 2}, {'x': 2}, {'x': 3, 'y': 6}, {'x': 4, 'y': 8}]
        with pytest.raises(InvalidInputError):
            analyzer.regress(rows, 'y', ['x'])

    @pytest.mark.parametrize('dependent, independents', [
        (None, ['units']),
        ('revenue', []),
        ('units', ['units']),
        ('units', ['revenue', 'revenue']),
        ('units', ['profit']),
    ])
    def test_invalid_variable_selection(self, analyzer, sales_table, dependent, independents):
        with pytest.raises(InvalidInputError):
            analyzer.regress(sales_table, dependent, independents)

    def test_to_dict_keys(self, analyzer):
        rows = [{'x': x, 'y': 2 * x + 3} for x in [1, 2, 3, 4]]
        result = analyzer.regress(rows, 'y', ['x']).to_dict()

        assert result['dependentVariable'] == 'y'
        assert result['independentVariables'] == ['x']
        assert set(result) == {'dependentVariable', 'independentVariables', 'coefficients',
                               'intercept', 'rSquared', 'adjustedRSquared', 'predictions'}
