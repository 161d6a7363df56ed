"""Exception hierarchy for the matrix calculator."""


class MatrixCalculatorError(Exception):
    """Base class for all calculator errors."""


class CalculationError(MatrixCalculatorError):
    """A pipeline stage raised while computing its partial result.

    Attributes:
        stage: Name of the failed stage
        cause: The original exception
    """

    def __init__(self, stage: str, cause: BaseException):
        self.stage = stage
        self.cause = cause
        super().__init__(f"Stage '{stage}' failed: {type(cause).__name__}: {cause}")


class ConfigurationError(MatrixCalculatorError):
    """A pricing or parameter document could not be validated."""
