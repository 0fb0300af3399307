# errors.py - exceptions shared across the counter package


class ConfigurationError(ValueError):
    """Raised when a counter, tree or preprocessor is built with invalid settings."""
