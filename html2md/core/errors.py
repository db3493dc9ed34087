"""
Error hierarchy for html2md.

The converter itself never raises for bad markup; these exceptions cover the
surfaces around it (input handling, settings files, the command line).
"""

from typing import Any, Dict, Optional


class Html2MdError(Exception):
    """Base exception for all html2md operations.

    Carries an error code and context data for structured logging.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.context = context or {}
        self.cause = cause

    def __str__(self) -> str:
        base_msg = self.message
        if self.error_code:
            base_msg = f"[{self.error_code}] {base_msg}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg = f"{base_msg} (Context: {context_str})"
        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
        }


class ConversionError(Html2MdError):
    """Input that cannot be handed to the converter at all."""

    def __init__(
        self,
        message: str,
        input_type: Optional[str] = None,
        source: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", None) or {}
        if input_type:
            context["input_type"] = input_type
        if source:
            context["source"] = source

        super().__init__(message, context=context, **kwargs)


class ConfigurationError(Html2MdError):
    """Configuration loading and validation errors."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", None) or {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value

        super().__init__(message, context=context, **kwargs)


def unsupported_input_error(value: Any) -> ConversionError:
    """Create a conversion error for input that is neither text nor bytes."""
    type_name = type(value).__name__
    return ConversionError(
        f"Cannot convert input of type {type_name}; expected str or bytes",
        input_type=type_name,
        error_code="UNSUPPORTED_INPUT",
    )


def config_validation_error(key: str, value: Any, reason: str) -> ConfigurationError:
    """Create a configuration validation error."""
    return ConfigurationError(
        f"Invalid configuration for '{key}': {reason}",
        config_key=key,
        config_value=value,
        error_code="CONFIG_INVALID",
    )
