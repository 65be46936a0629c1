"""Meal analysis errors. ``str(exc)`` is always safe to show to the user."""
from mealvision.constants import (
    MSG_ERR_ANALYSIS_FAILED,
    MSG_ERR_INVALID_IMAGE,
    MSG_ERR_NOT_CONFIGURED,
    MSG_ERR_QUOTA,
    MSG_ERR_RATE_LIMIT,
    PROVIDER_ERR_INVALID_REQUEST,
    PROVIDER_ERR_QUOTA,
    PROVIDER_ERR_RATE_LIMIT,
)


class MealAnalysisError(Exception):
    default_message = MSG_ERR_ANALYSIS_FAILED

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class NotConfiguredError(MealAnalysisError):
    default_message = MSG_ERR_NOT_CONFIGURED


class QuotaExceededError(MealAnalysisError):
    default_message = MSG_ERR_QUOTA


class RateLimitedError(MealAnalysisError):
    default_message = MSG_ERR_RATE_LIMIT


class InvalidImageError(MealAnalysisError):
    default_message = MSG_ERR_INVALID_IMAGE


class AnalysisFailedError(MealAnalysisError):
    pass


class EmptyResponseError(AnalysisFailedError):
    """The provider answered without any text content."""


class MalformedResponseError(AnalysisFailedError):
    """The reply text holds no parseable JSON object."""


def translate_provider_error(
    exc: BaseException, fallback: str = MSG_ERR_ANALYSIS_FAILED
) -> MealAnalysisError:
    """Map a provider/SDK error onto the user-facing error set by its message text."""
    match exc:
        case MealAnalysisError() if not isinstance(exc, AnalysisFailedError):
            return exc
        case _:
            pass

    text = str(exc).lower()
    match text:
        case t if PROVIDER_ERR_QUOTA in t:
            return QuotaExceededError()
        case t if PROVIDER_ERR_RATE_LIMIT in t:
            return RateLimitedError()
        case t if PROVIDER_ERR_INVALID_REQUEST in t:
            return InvalidImageError()
        case _:
            pass

    match exc:
        case EmptyResponseError():
            return EmptyResponseError(fallback)
        case MalformedResponseError():
            return MalformedResponseError(fallback)
        case _:
            return AnalysisFailedError(fallback)
