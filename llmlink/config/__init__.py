"""Configuration modules for llmlink."""

from .network import (
    NetworkConfig,
    load_network_config,
    DEFAULT_PROXY_PORT,
    DEFAULT_CONNECT_TIMEOUT_S,
    DEFAULT_REQUEST_TIMEOUT_S,
)
from .logging_config import (
    TRACE,
    configure_logging,
    get_logger,
)

__all__ = [
    'NetworkConfig',
    'load_network_config',
    'DEFAULT_PROXY_PORT',
    'DEFAULT_CONNECT_TIMEOUT_S',
    'DEFAULT_REQUEST_TIMEOUT_S',
    'TRACE',
    'configure_logging',
    'get_logger',
]
