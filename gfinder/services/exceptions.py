"""Domain-specific exceptions."""


class ServiceError(Exception):
    pass


class SearchError(ServiceError):
    pass


class SearchHttpError(SearchError):
    def __init__(self, status_code: int, reason: str) -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"API Error: {status_code} {reason}".rstrip())


class SearchTransportError(SearchError):
    pass
