# utils/errors.py


class UiElementNotFoundError(AssertionError):
    """A required UI element was absent after every recovery attempt."""

    def __init__(self, message, query=None):
        if query is not None:
            message = f"{message} ({query.describe()})"
        super().__init__(message)
        self.query = query


class AppiumSessionError(RuntimeError):
    """The Appium session could not be started or is not running."""
