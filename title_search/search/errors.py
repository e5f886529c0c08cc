from __future__ import annotations


class SearchError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, body_snippet: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body_snippet = body_snippet


class InvalidMaxResultsError(SearchError, ValueError):
    def __init__(self, max_results: int) -> None:
        super().__init__("max_results must be greater than zero")
        self.max_results = max_results


class ResultParsingError(SearchError):
    """The provider answered, but not with the JSON shape we expect."""


class SearchProviderError(SearchError):
    """
    The provider reported a failure, or the request never completed.

    `str(err)` is the provider's own message text, verbatim, so upstream issues
    (bad credentials, quota, outages) can be diagnosed from logs.
    """

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        status_code: int | None = None,
        body_snippet: str | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, body_snippet=body_snippet)
        self.provider = provider
        self.provider_message = message


class SearchCancelledError(SearchProviderError):
    """The caller's deadline passed or the search was cancelled."""
