"""Provider catalog: credential records, environment variables and CLI guidance."""

from .catalog import ProviderInfo, all_providers, find_provider_info, get_provider_info
from .envvars import credential_environment
from .guidance import (
    invalid_provider_config_guidance,
    kind_detection_error_guidance,
    missing_provider_config_guidance,
)

__all__ = [
    "ProviderInfo",
    "all_providers",
    "credential_environment",
    "find_provider_info",
    "get_provider_info",
    "invalid_provider_config_guidance",
    "kind_detection_error_guidance",
    "missing_provider_config_guidance",
]
