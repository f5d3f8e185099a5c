"""Fetch failures raised at the snapshot fetcher boundary."""


class FetchError(Exception):
    """A data source produced no snapshot this cycle."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source


class TransportError(FetchError):
    """Network unreachable, timed out, or a non-2xx status."""


class ParseError(FetchError):
    """Response body is not JSON or does not match the expected shape."""
