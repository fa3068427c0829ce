"""Custom exceptions and error handling utilities for the city imagery pipeline."""

from __future__ import annotations

from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

from .logging_config import get_logger


class CityImageryError(Exception):
    """Base exception for all city imagery pipeline errors."""


class ProviderRequestError(CityImageryError):
    """A single request to the image-search provider failed."""

    def __init__(
        self, message: str, status: Optional[int] = None, retryable: bool = False
    ) -> None:
        super().__init__(message)
        self.status = status
        self.retryable = retryable


class LocationProcessingError(CityImageryError):
    """Error raised when processing a single location fails."""


class ConfigurationError(CityImageryError):
    """Error raised for invalid configuration options."""


class ReportExportError(CityImageryError):
    """Error raised when a run report cannot be written."""


F = TypeVar("F", bound=Callable[..., Any])


def with_error_handling(func: F) -> F:
    """Wrap a function with standardized error handling."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:  # type: ignore[override]
        logger = get_logger("pipeline")
        try:
            return func(*args, **kwargs)
        except CityImageryError:
            logger.error("Pipeline error", exc_info=True)
            raise
        except Exception as exc:  # noqa: BLE001
            logger.error(f"Unhandled error in {func.__name__}: {exc}", exc_info=True)
            raise LocationProcessingError(str(exc)) from exc

    return wrapper  # type: ignore[return-value]


@contextmanager
def location_error_handler() -> Any:
    """Context manager that turns unexpected errors into LocationProcessingError."""
    try:
        yield
    except CityImageryError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise LocationProcessingError(str(exc)) from exc
