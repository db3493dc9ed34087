"""html2md - single pass HTML to Markdown converter."""

__version__ = "1.0.0"

from html2md.core.config import Html2MdSettings, get_settings, reset_settings
from html2md.core.converter import Converter, convert
from html2md.core.errors import ConfigurationError, ConversionError, Html2MdError

__all__ = [
    "Converter",
    "convert",
    "Html2MdSettings",
    "get_settings",
    "reset_settings",
    "Html2MdError",
    "ConversionError",
    "ConfigurationError",
]
