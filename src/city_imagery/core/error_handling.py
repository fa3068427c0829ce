# src/city_imagery/core/error_handling.py

import asyncio
import functools
import logging

from .exceptions import ProviderRequestError

RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)


def is_retryable_status(status):
    return status in RETRYABLE_STATUS_CODES


def retry_provider_request(max_attempts=3, delay_seconds=0.1):
    """
    Decorator to retry async provider requests with a fixed delay.

    The wrapped coroutine must be a method. When the instance exposes
    ``max_attempts``, ``request_delay_seconds`` or ``sleep`` attributes they
    take precedence over the decorator arguments.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            logger = logging.getLogger(func.__module__ + '.' + func.__name__)
            attempts_allowed = max(1, getattr(self, "max_attempts", max_attempts))
            delay = getattr(self, "request_delay_seconds", delay_seconds)
            sleep = getattr(self, "sleep", asyncio.sleep)
            attempts = 0
            while True:
                try:
                    return await func(self, *args, **kwargs)
                except ProviderRequestError as e:
                    attempts += 1
                    if not e.retryable:
                        logger.warning(f"Provider request '{func.__name__}' failed with non-retryable error: {e}")
                        raise
                    if attempts >= attempts_allowed:
                        logger.warning(
                            f"Provider request '{func.__name__}' failed after {attempts} attempts. Error: {e}"
                        )
                        raise
                    logger.info(
                        f"Provider request '{func.__name__}' failed. Attempt {attempts}/{attempts_allowed}. "
                        f"Retrying in {delay:.2f}s. Error: {e}"
                    )
                    await sleep(delay)
        return wrapper
    return decorator


class BatchOperationContextManager:
    """
    Collect per-location failures during a run and log a summary on exit.

    Exceptions raised inside the block are logged and propagated.
    """
    def __init__(self, operation_name="Batch Operation"):
        self.operation_name = operation_name
        self.errors = []
        self.processed = 0
        self.logger = logging.getLogger(self.__class__.__module__ + '.' + self.__class__.__name__)

    def __enter__(self):
        self.logger.info(f"Starting {self.operation_name}.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.logger.error(
                f"{self.operation_name} aborted after {self.processed} location(s): {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb)
            )
        elif self.errors:
            self.logger.warning(
                f"{self.operation_name} completed with {len(self.errors)} failed "
                f"location(s) out of {self.processed}."
            )
            for error_detail in self.errors:
                self.logger.error(f"  {error_detail['item']}: {error_detail['error']}")
        else:
            self.logger.info(
                f"{self.operation_name} completed: {self.processed} location(s) processed."
            )
        return False

    def add_error(self, error_message, item_identifier="Unknown location"):
        self.errors.append({"item": item_identifier, "error": str(error_message)})
        self.logger.debug(f"Failure recorded for '{item_identifier}': {error_message}")

    def record_outcomes(self, outcomes):
        """Count a batch's outcomes, collect its failures and return how many failed."""
        failed = 0
        for outcome in outcomes:
            self.processed += 1
            if not outcome.success:
                failed += 1
                self.add_error(
                    outcome.error_message or "Unknown error",
                    item_identifier=outcome.location_name,
                )
        return failed
