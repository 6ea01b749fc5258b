class ConfigurationError(Exception):
    """Raised when the contact log spreadsheet isn't configured (no id / ranges)."""
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class RowSourceError(Exception):
    """Raised when contact rows can't be read from the spreadsheet."""
    def __init__(self, message):
        super().__init__(message)
        self.message = message
