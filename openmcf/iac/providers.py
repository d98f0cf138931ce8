"""Provider handle construction from credential records."""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from pydantic import BaseModel

from ..exceptions import ProviderSetupFailed, ResourceCreationFailed
from ..manifest.enums import CloudResourceProvider
from ..provider.catalog import get_provider_info
from ..provider.credentials import (
    AwsProviderConfig,
    AzureProviderConfig,
    CivoProviderConfig,
    CloudflareAuthScheme,
    CloudflareProviderConfig,
    ConfluentProviderConfig,
    DigitalOceanProviderConfig,
    GcpProviderConfig,
    KubernetesProviderConfig,
)
from ..provider.envvars import decode_base64, kubeconfig_content
from .engine import EngineContext, ProviderHandle

logger = logging.getLogger(__name__)


def _drop_empty(props: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in props.items() if v not in (None, "")}


def _aws_props(config: AwsProviderConfig) -> Dict[str, Any]:
    return _drop_empty(
        {
            "region": config.region,
            "accessKey": config.access_key_id,
            "secretKey": config.secret_access_key,
            "token": config.session_token,
        }
    )


def _azure_props(config: AzureProviderConfig) -> Dict[str, Any]:
    return {
        "clientId": config.client_id,
        "clientSecret": config.client_secret,
        "subscriptionId": config.subscription_id,
        "tenantId": config.tenant_id,
    }


def _gcp_props(config: GcpProviderConfig) -> Dict[str, Any]:
    return _drop_empty(
        {
            "credentials": decode_base64(
                config.service_account_key_base64, "service account key", "gcp"
            ),
            "project": config.project_id,
        }
    )


def _digitalocean_props(config: DigitalOceanProviderConfig) -> Dict[str, Any]:
    return _drop_empty(
        {
            "token": config.api_token,
            "spacesAccessId": config.spaces_access_id,
            "spacesSecretKey": config.spaces_secret_key,
        }
    )


def _cloudflare_props(config: CloudflareProviderConfig) -> Dict[str, Any]:
    if config.auth_scheme == CloudflareAuthScheme.LEGACY_API_KEY:
        return {"apiKey": config.api_key, "email": config.email}
    return {"apiToken": config.api_token}


def _civo_props(config: CivoProviderConfig) -> Dict[str, Any]:
    props = {"token": config.api_token}
    if config.default_region is not None:
        props["region"] = str(config.default_region)
    return props


def _confluent_props(config: ConfluentProviderConfig) -> Dict[str, Any]:
    return {"cloudApiKey": config.api_key, "cloudApiSecret": config.api_secret}


def _kubernetes_props(config: KubernetesProviderConfig) -> Dict[str, Any]:
    return _drop_empty({"kubeconfig": kubeconfig_content(config), "context": config.context})


# Engine provider package -> (provider, props builder)
PROVIDER_PACKAGES: Dict[str, Tuple[CloudResourceProvider, Callable[[Any], Dict[str, Any]]]] = {
    "aws": (CloudResourceProvider.AWS, _aws_props),
    "azure": (CloudResourceProvider.AZURE, _azure_props),
    "azure-native": (CloudResourceProvider.AZURE, _azure_props),
    "gcp": (CloudResourceProvider.GCP, _gcp_props),
    "digitalocean": (CloudResourceProvider.DIGITAL_OCEAN, _digitalocean_props),
    "cloudflare": (CloudResourceProvider.CLOUDFLARE, _cloudflare_props),
    "civo": (CloudResourceProvider.CIVO, _civo_props),
    "confluentcloud": (CloudResourceProvider.CONFLUENT, _confluent_props),
    "kubernetes": (CloudResourceProvider.KUBERNETES, _kubernetes_props),
}


def build_provider(
    ctx: EngineContext,
    package: str,
    config: Optional[BaseModel],
    name: Optional[str] = None,
) -> ProviderHandle:
    """Register a provider instance for `package` from a credential record.

    Without a credential record the provider is built from the SDK's ambient
    credentials when the catalog allows it.

    Raises:
        ProviderSetupFailed: credentials absent and not ambient-capable, the
            record does not belong to this provider, or construction failed
    """
    if package not in PROVIDER_PACKAGES:
        raise ProviderSetupFailed(package, f"no provider builder for package '{package}'")
    provider, props_builder = PROVIDER_PACKAGES[package]
    info = get_provider_info(provider)
    name = name or f"{package}-provider"

    if config is None:
        if not info.allows_ambient_credentials:
            raise ProviderSetupFailed(provider.value)
        logger.info(f"No {info.display_name} provider config; using ambient credentials")
        props: Dict[str, Any] = {}
    elif not isinstance(config, info.credential_model):
        raise ProviderSetupFailed(
            provider.value,
            f"expected {info.credential_model.__name__}, got {type(config).__name__}",
        )
    else:
        props = props_builder(config)

    try:
        return ctx.create_provider(package, name, props)
    except ResourceCreationFailed as e:
        raise ProviderSetupFailed(
            provider.value, f"failed to construct {info.display_name} provider", cause=e
        ) from e
