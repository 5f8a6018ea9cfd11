"""Application configuration helpers."""

from __future__ import annotations

from .backoffice import (
    DEFAULT_SEARCH_LIMIT,
    BackofficeConfig,
    get_backoffice_config,
    get_search_limit,
)
from .env import env_float, env_int, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .parser import InvoiceParserConfig, get_parser_config
from .pricing import PricingConfig, get_pricing_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_SEARCH_LIMIT",
    "BackofficeConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "InvoiceParserConfig",
    "MissingConfigurationError",
    "PricingConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "env_float",
    "env_int",
    "get_backoffice_config",
    "get_database_config",
    "get_parser_config",
    "get_pricing_config",
    "get_search_limit",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
