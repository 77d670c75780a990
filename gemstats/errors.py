"""Error types raised by the service layer and mapped to HTTP by error_handlers."""

NOT_FOUND_MESSAGE = "This package could not be found."


class GemstatsError(Exception):
    """Base class; subclasses set a user-facing message and an HTTP status."""

    http_status = 500
    message = "An unexpected error occurred"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class PackageNotFound(GemstatsError):
    """A package name or full version name did not resolve."""

    http_status = 404
    message = NOT_FOUND_MESSAGE

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__()
