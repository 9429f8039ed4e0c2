"""
Tiered Logging Configuration for llmlink

Provides a flexible logging system with 5 levels:
- TRACE (5): Ultra-verbose debugging (request bodies, header names)
- DEBUG (10): Detailed debugging (resolution steps, host lookup failures)
- INFO (20): Standard operational messages (chosen transport policy, completions)
- WARN (30): Warnings (malformed configuration, fallbacks)
- ERROR (40): Errors (failed requests)

Environment Variables:
- LOG_LEVEL: Global log level (TRACE, DEBUG, INFO, WARN, ERROR) [default: INFO]
- LOG_LEVEL_NETWORK: Override for the network layer (resolver, host proxy, executor)
- LOG_LEVEL_LLM: Override for providers and the provider factory

Example Usage:
    from llmlink.config.logging_config import get_logger

    logger = get_logger(__name__)
    logger.trace("🔍 Request body: %d bytes", len(body))
    logger.debug("🌐 Host proxy lookup skipped")
    logger.info("✅ Using direct connection")
    logger.warning("⚠️ Ignoring malformed proxy port")
    logger.error("❌ Request failed: %s", error)
"""

import logging
import os


# Define custom TRACE level (more verbose than DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def trace(self, message, *args, **kwargs):
    """Log a message with severity 'TRACE'."""
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)


# Add trace method to Logger class
logging.Logger.trace = trace


# Module name mapping: Python module path → Logical area name
MODULE_NAME_MAP = {
    "llmlink.network.resolver": "llmlink.network",
    "llmlink.network.host_proxy": "llmlink.network",
    "llmlink.network.executor": "llmlink.network",
    "llmlink.network.classifier": "llmlink.network",
    "llmlink.llm.base": "llmlink.llm",
    "llmlink.llm.factory": "llmlink.llm",
    "llmlink.llm.anthropic": "llmlink.llm",
    "llmlink.llm.openai_compat": "llmlink.llm",
    "llmlink.llm.mistral": "llmlink.llm",
    "llmlink.llm.openrouter": "llmlink.llm",
    "llmlink.llm.gemini": "llmlink.llm",
}

AREA_OVERRIDES = ["NETWORK", "LLM"]


def get_log_level(module_name: str, default: str = "INFO") -> int:
    """
    Get the log level for a module, checking both area-specific and global env vars.

    Priority:
    1. Area-specific env var (LOG_LEVEL_NETWORK, LOG_LEVEL_LLM)
    2. Global LOG_LEVEL env var
    3. Default level (INFO)

    Args:
        module_name: Python module name (e.g., "llmlink.network.resolver")
        default: Default log level if no env vars set

    Returns:
        Numeric log level (5=TRACE, 10=DEBUG, 20=INFO, 30=WARN, 40=ERROR)
    """
    logical_name = MODULE_NAME_MAP.get(module_name)

    # "llmlink.network" → "NETWORK"
    area_name = logical_name.split(".")[-1].upper() if logical_name else None

    if area_name:
        area_level = os.getenv(f"LOG_LEVEL_{area_name}")
        if area_level:
            return _parse_log_level(area_level)

    global_level = os.getenv("LOG_LEVEL")
    if global_level:
        return _parse_log_level(global_level)

    return _parse_log_level(default)


def _parse_log_level(level_str: str) -> int:
    """
    Parse log level string to numeric value.

    Unknown names map to INFO.
    """
    level_map = {
        "TRACE": TRACE,
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
    }
    return level_map.get(level_str.strip().upper(), logging.INFO)


def configure_logging(default_level: str = "INFO") -> None:
    """
    Configure logging system with tiered levels and per-area control.

    Libraries never call this; applications embedding llmlink call it once at startup.

    Args:
        default_level: Default log level if LOG_LEVEL env var not set
    """
    global_level = os.getenv("LOG_LEVEL", default_level)
    numeric_level = _parse_log_level(global_level)

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.info(f"🚀 Logging system initialized (global level: {global_level})")

    area_overrides = []
    for env_var in AREA_OVERRIDES:
        override = os.getenv(f"LOG_LEVEL_{env_var}")
        if override:
            area_overrides.append(f"{env_var}={override}")

    if area_overrides:
        root_logger.info(f"📋 Area overrides: {', '.join(area_overrides)}")


def get_logger(module_name: str) -> logging.Logger:
    """
    Get a logger for a module with appropriate log level.

    This is the main entry point for getting loggers in llmlink code.

    Args:
        module_name: Python module name (use __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(module_name)
    logger.setLevel(get_log_level(module_name))
    return logger
