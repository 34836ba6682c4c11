"""Record-related exceptions."""


class RecordLoadError(Exception):
    """Raised when a bundle file or config file cannot be loaded."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class RecordValidationError(Exception):
    """Raised when resolved data does not match the expected record shape."""

    def __init__(self, message: str, errors: list[dict] | None = None):
        self.errors = errors or []
        super().__init__(message)


class ReferenceResolutionError(Exception):
    """Raised when the resolver cannot satisfy a reference."""

    def __init__(self, ref: str | None, message: str | None = None):
        self.ref = ref
        if message is None:
            message = f"Cannot resolve reference: {ref or '<root>'}"
        super().__init__(message)
