class AnalysisError(Exception):
    """Base class for errors raised by the analysis engine"""


class InvalidInputError(AnalysisError):
    """Raised for empty tables, unknown options or missing column names"""


class DegenerateComputationError(AnalysisError):
    """Raised when a statistic is undefined for the given data"""


class EmptyColumnError(DegenerateComputationError):
    """Raised when a column has no values usable for the requested statistic"""

    def __init__(self, column_type, message=None):
        self.column_type = column_type
        super().__init__(message or f"No valid {column_type} values to summarize")
