"""Custom exception classes for MealPlanner."""

from typing import Optional


class MealPlannerBaseError(Exception):
    """Base class for all custom exceptions in MealPlanner."""

    pass


class ConfigurationError(MealPlannerBaseError):
    """Raised when loading or validating the configuration file fails."""

    pass


class VaultError(MealPlannerBaseError):
    """
    Raised by a secret vault backend when the underlying storage
    refuses or fails an operation.
    """

    def __init__(
        self,
        message: str,
        namespace: Optional[str] = None,
        orig_exc: Optional[Exception] = None,
    ):
        self.namespace = namespace
        self.orig_exc = orig_exc

        full_msg = "Vault error"
        if namespace:
            full_msg += f" (namespace: {namespace})"
        full_msg += f": {message}"
        if orig_exc:
            full_msg += f" (original error: {type(orig_exc).__name__})"
        super().__init__(full_msg)
