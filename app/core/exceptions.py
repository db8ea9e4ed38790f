from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RosterAggregationError(ServiceError):
    """Any failed read while assembling the roster. Never carries the upstream detail."""

    def __init__(self, message: str = "Unable to fetch classes due to an internal error.") -> None:
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)
