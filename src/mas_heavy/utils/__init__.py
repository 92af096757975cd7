"""Shared utility functions.

This subpackage provides common utility functions used across
the application with no dependencies on other subpackages.

Key modules:
    - parsing: JSON extraction from model output
    - paths: Path safety and asset resolution
    - logging: Logging configuration
    - protocols: Protocol definitions for dependency injection
"""

from .parsing import load_json_object
from .paths import ensure_within, resolve_asset_path
from .logging import configure_logging, get_logger
from .protocols import LLMTransport, SessionProtocol, CopilotClientProtocol

__all__ = [
    # parsing
    "load_json_object",
    # paths
    "ensure_within",
    "resolve_asset_path",
    # logging
    "configure_logging",
    "get_logger",
    # protocols
    "LLMTransport",
    "SessionProtocol",
    "CopilotClientProtocol",
]
