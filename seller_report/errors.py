class SalesReportError(Exception):
    """Base class for every error raised while building a seller report."""


class InvalidInputError(SalesReportError):
    """
    Raised when the sellers, products or purchase records collection is
    missing, is not a sequence, is empty, or holds an entry that cannot be
    turned into its schema.
    """


class InvalidConfigurationError(SalesReportError):
    """Raised when the report options are missing or their strategies are not callable."""


class InvalidStrategyError(InvalidConfigurationError):
    """Raised when a strategy handed straight to a pipeline stage is not callable."""
