import logging

import numpy as np

from exceptions import DegenerateComputationError, InvalidInputError
from models import RegressionResult, Table
from utils.cell_values import to_number


class RegressionAnalyzer:
    """Multiple linear regression solved with the normal equation"""

    def regress(self, table, dependent, independents):
        """Fit dependent ~ independents and report coefficients, R² and predictions"""
        table = Table(table)
        independents = list(independents or [])

        if not dependent:
            raise InvalidInputError("Dependent variable is required")
        if not independents:
            raise InvalidInputError("At least one independent variable is required")
        if len(set(independents)) != len(independents):
            raise InvalidInputError("Independent variables must be distinct")
        if dependent in independents:
            raise InvalidInputError(f"'{dependent}' cannot be both dependent and independent")
        table.require_columns([dependent] + independents)

        n = len(table)
        p = len(independents)
        if n - p - 1 <= 0:
            raise DegenerateComputationError(
                f"Regression needs more than {p + 1} rows for {p} independent variable(s), got {n}"
            )

        X = self._design_matrix(table, independents)
        y = self._numeric_column(table, dependent)

        if np.ptp(y) == 0:
            raise DegenerateComputationError(
                f"R² is undefined because '{dependent}' is constant"
            )

        beta = self._solve_normal_equation(X, y)
        predictions = X @ beta

        total_ss = float(np.sum((y - y.mean()) ** 2))
        residual_ss = float(np.sum((y - predictions) ** 2))
        r_squared = 1 - residual_ss / total_ss
        adjusted_r_squared = 1 - (1 - r_squared) * (n - 1) / (n - p - 1)

        logging.info(f"Regression {dependent} ~ {' + '.join(independents)}: "
                     f"n={n}, R²={r_squared:.4f}")

        return RegressionResult(
            coefficients=[float(value) for value in beta[1:]],
            intercept=float(beta[0]),
            r_squared=float(r_squared),
            adjusted_r_squared=float(adjusted_r_squared),
            predictions=[float(value) for value in predictions],
            dependent=dependent,
            independents=independents,
        )

    def _numeric_column(self, table, column):
        values = []
        for index, raw in enumerate(table.column(column)):
            number = to_number(raw)
            if number is None:
                raise InvalidInputError(
                    f"Non-numeric value {raw!r} in column '{column}' at row {index}"
                )
            values.append(number)
        return np.asarray(values, dtype=float)

    def _design_matrix(self, table, independents):
        """Independent columns with a leading column of ones for the intercept"""
        columns = [np.ones(len(table))]
        columns.extend(self._numeric_column(table, column) for column in independents)
        return np.column_stack(columns)

    def _solve_normal_equation(self, X, y):
        """beta = (XᵀX)⁻¹ Xᵀy"""
        if np.linalg.matrix_rank(X) < X.shape[1]:
            raise DegenerateComputationError("Independent variables are collinear or constant")

        xtx = X.T @ X
        try:
            xtx_inv = np.linalg.inv(xtx)
        except np.linalg.LinAlgError as e:
            raise DegenerateComputationError(
                f"Independent variables are collinear or constant: {e}"
            ) from e
        return xtx_inv @ (X.T @ y)
