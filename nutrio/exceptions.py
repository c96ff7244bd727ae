"""
Standardized exception hierarchy for the nutrio progression engine
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class NutrioError(Exception):
    """
    Base exception for all nutrio errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise NutrioError(
            message="Failed to grant XP",
            user_id="123456",
            operation="grant_reward",
            context={"source": "meal_log"}
        )
    """

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # Avoid conflict with logging's 'message' field
            "request_id": self.request_id,
            "user_id": self.user_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for API responses"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (Caller Input)
# ==========================================

class ValidationError(NutrioError):
    """
    Raised when caller input fails validation

    Example:
        raise ValidationError(
            message="Level must be at least 1",
            field="level",
            value=0
        )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        kwargs.setdefault("user_message", f"Invalid {field}: {message}" if field else message)
        super().__init__(
            message=message,
            context={"field": field, "value": repr(value)},
            **kwargs
        )


class InvalidAmountError(ValidationError):
    """XP amount is negative, non-finite or not a whole number"""

    def __init__(self, amount: Any, field: str = "amount", **kwargs):
        self.amount = amount
        super().__init__(
            message=f"XP {field} must be a finite, non-negative whole number (got {amount!r})",
            field=field,
            value=amount,
            user_message="That XP amount is not valid.",
            **kwargs
        )


# ==========================================
# Catalog Lookup Errors
# ==========================================

class CatalogLookupError(NutrioError):
    """
    Base class for static catalog misses
    """

    def __init__(
        self,
        message: str,
        catalog: Optional[str] = None,
        key: Optional[str] = None,
        **kwargs
    ):
        self.catalog = catalog
        self.key = key
        kwargs.setdefault("user_message", f"{catalog or 'Catalog'} entry not found.")
        super().__init__(
            message=message,
            context={"catalog": catalog, "key": key},
            **kwargs
        )


class UnknownSourceError(CatalogLookupError):
    """Reward source is not in the reward catalog"""

    def __init__(self, source: Any, **kwargs):
        super().__init__(
            message=f"Unknown reward source: {source!r}",
            catalog="reward",
            key=str(source),
            **kwargs
        )


class UnknownAchievementError(CatalogLookupError):
    """Achievement id is not in the achievement catalog"""

    def __init__(self, achievement_id: Any, **kwargs):
        super().__init__(
            message=f"Unknown achievement id: {achievement_id!r}",
            catalog="achievement",
            key=str(achievement_id),
            **kwargs
        )


# ==========================================
# Concurrency Errors
# ==========================================

class ConcurrencyError(NutrioError):
    """
    Base class for concurrent-writer failures
    """
    pass


class StaleStateConflictError(ConcurrencyError):
    """Compare-and-swap on a progression document lost to another writer"""

    def __init__(
        self,
        message: str = "Progression state was modified by another writer",
        expected_version: Optional[int] = None,
        actual_version: Optional[int] = None,
        **kwargs
    ):
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            message=message,
            user_message="Your progress was updated elsewhere. Please try again.",
            context={"expected_version": expected_version, "actual_version": actual_version},
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(NutrioError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )
