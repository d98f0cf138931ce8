"""Provider catalog.

One immutable ProviderInfo per cloud provider: its credential record plus the
metadata the CLI shows when credentials are missing or invalid.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Type

from pydantic import BaseModel

from ..manifest.enums import CloudResourceProvider
from .credentials import (
    AwsProviderConfig,
    AzureProviderConfig,
    CivoProviderConfig,
    CloudflareProviderConfig,
    ConfluentProviderConfig,
    DigitalOceanProviderConfig,
    GcpProviderConfig,
    KubernetesProviderConfig,
)


@dataclass(frozen=True)
class ProviderInfo:
    """Credential schema and CLI metadata for one provider."""

    provider: CloudResourceProvider
    display_name: str
    credential_model: Type[BaseModel]
    environment_variables: Tuple[str, ...]
    environment_variables_help: str
    config_file_example: str
    config_file_name: str
    docs_url: str
    # Build a provider from the SDK's own credential chain when no config is given
    allows_ambient_credentials: bool = False
    aliases: Tuple[str, ...] = field(default_factory=tuple)


_CATALOG: Dict[CloudResourceProvider, ProviderInfo] = {
    info.provider: info
    for info in (
        ProviderInfo(
            provider=CloudResourceProvider.AWS,
            display_name="AWS",
            credential_model=AwsProviderConfig,
            environment_variables=(
                "AWS_ACCESS_KEY_ID",
                "AWS_SECRET_ACCESS_KEY",
                "AWS_DEFAULT_REGION",
                "AWS_REGION",
                "AWS_SESSION_TOKEN",
                "AWS_PROFILE",
            ),
            environment_variables_help=(
                'export AWS_ACCESS_KEY_ID="<your-access-key-id>"\n'
                'export AWS_SECRET_ACCESS_KEY="<your-secret-access-key>"\n'
                'export AWS_DEFAULT_REGION="us-west-2"'
            ),
            config_file_example=(
                'account_id: "<your-aws-account-id>"\n'
                'access_key_id: "<your-access-key-id>"\n'
                'secret_access_key: "<your-secret-access-key>"\n'
                'region: "us-west-2"'
            ),
            config_file_name="aws-provider-config.yaml",
            docs_url="https://docs.aws.amazon.com/cli/latest/userguide/cli-configure-envvars.html",
            allows_ambient_credentials=True,
        ),
        ProviderInfo(
            provider=CloudResourceProvider.AZURE,
            display_name="Azure",
            credential_model=AzureProviderConfig,
            environment_variables=(
                "ARM_CLIENT_ID",
                "ARM_CLIENT_SECRET",
                "ARM_TENANT_ID",
                "ARM_SUBSCRIPTION_ID",
            ),
            environment_variables_help=(
                'export ARM_CLIENT_ID="<your-client-id>"\n'
                'export ARM_CLIENT_SECRET="<your-client-secret>"\n'
                'export ARM_TENANT_ID="<your-tenant-id>"\n'
                'export ARM_SUBSCRIPTION_ID="<your-subscription-id>"'
            ),
            config_file_example=(
                'client_id: "<your-client-id>"\n'
                'client_secret: "<your-client-secret>"\n'
                'tenant_id: "<your-tenant-id>"\n'
                'subscription_id: "<your-subscription-id>"'
            ),
            config_file_name="azure-provider-config.yaml",
            docs_url="https://learn.microsoft.com/en-us/azure/developer/terraform/authenticate-to-azure",
        ),
        ProviderInfo(
            provider=CloudResourceProvider.GCP,
            display_name="GCP",
            credential_model=GcpProviderConfig,
            environment_variables=(
                "GOOGLE_APPLICATION_CREDENTIALS",
                "GOOGLE_CLOUD_PROJECT",
                "GOOGLE_PROJECT",
                "GCLOUD_PROJECT",
                "CLOUDSDK_CORE_PROJECT",
            ),
            environment_variables_help=(
                'export GOOGLE_APPLICATION_CREDENTIALS="/path/to/service-account-key.json"\n'
                'export GOOGLE_CLOUD_PROJECT="<your-project-id>"'
            ),
            config_file_example='service_account_key_base64: "<base64-encoded-service-account-json>"',
            config_file_name="gcp-provider-config.yaml",
            docs_url="https://cloud.google.com/docs/authentication/application-default-credentials",
        ),
        ProviderInfo(
            provider=CloudResourceProvider.DIGITAL_OCEAN,
            display_name="DigitalOcean",
            credential_model=DigitalOceanProviderConfig,
            environment_variables=(
                "DIGITALOCEAN_TOKEN",
                "DIGITALOCEAN_ACCESS_TOKEN",
                "SPACES_ACCESS_KEY_ID",
                "SPACES_SECRET_ACCESS_KEY",
            ),
            environment_variables_help='export DIGITALOCEAN_TOKEN="<your-api-token>"',
            config_file_example=(
                'api_token: "<your-api-token>"\n'
                "default_region: 1  # See DigitalOceanRegion enum for values"
            ),
            config_file_name="digitalocean-provider-config.yaml",
            docs_url="https://docs.digitalocean.com/reference/api/create-personal-access-token/",
            aliases=("digital-ocean", "digital_ocean"),
        ),
        ProviderInfo(
            provider=CloudResourceProvider.CIVO,
            display_name="Civo",
            credential_model=CivoProviderConfig,
            environment_variables=("CIVO_TOKEN",),
            environment_variables_help='export CIVO_TOKEN="<your-api-token>"',
            config_file_example=(
                'api_token: "<your-api-token>"\n'
                "default_region: 1  # See CivoRegion enum for values"
            ),
            config_file_name="civo-provider-config.yaml",
            docs_url="https://dashboard.civo.com/security",
        ),
        ProviderInfo(
            provider=CloudResourceProvider.CLOUDFLARE,
            display_name="Cloudflare",
            credential_model=CloudflareProviderConfig,
            environment_variables=(
                "CLOUDFLARE_API_TOKEN",
                "CLOUDFLARE_API_KEY",
                "CLOUDFLARE_EMAIL",
            ),
            environment_variables_help='export CLOUDFLARE_API_TOKEN="<your-cloudflare-api-token>"',
            config_file_example=(
                "auth_scheme: 1  # 1=API_TOKEN (recommended), 2=LEGACY_API_KEY\n"
                'api_token: "<your-cloudflare-api-token>"'
            ),
            config_file_name="cloudflare-provider-config.yaml",
            docs_url="https://developers.cloudflare.com/fundamentals/api/get-started/create-token/",
        ),
        ProviderInfo(
            provider=CloudResourceProvider.CONFLUENT,
            display_name="Confluent Cloud",
            credential_model=ConfluentProviderConfig,
            environment_variables=(
                "CONFLUENT_CLOUD_API_KEY",
                "CONFLUENT_CLOUD_API_SECRET",
            ),
            environment_variables_help=(
                'export CONFLUENT_CLOUD_API_KEY="<your-api-key>"\n'
                'export CONFLUENT_CLOUD_API_SECRET="<your-api-secret>"'
            ),
            config_file_example='api_key: "<your-api-key>"\napi_secret: "<your-api-secret>"',
            config_file_name="confluent-provider-config.yaml",
            docs_url="https://docs.confluent.io/cloud/current/access-management/authenticate/api-keys/api-keys.html",
        ),
        ProviderInfo(
            provider=CloudResourceProvider.KUBERNETES,
            display_name="Kubernetes",
            credential_model=KubernetesProviderConfig,
            environment_variables=(
                "KUBECONFIG",
                "KUBE_CONFIG_PATH",
                "KUBE_CONTEXT",
            ),
            environment_variables_help=(
                'export KUBECONFIG="/path/to/kubeconfig"\n'
                "# Or use default: ~/.kube/config"
            ),
            config_file_example=(
                'kubeconfig: "<base64-encoded-kubeconfig-or-path>"\n'
                'context: "<kube-context>"  # optional'
            ),
            config_file_name="kubernetes-provider-config.yaml",
            docs_url="https://kubernetes.io/docs/concepts/configuration/organize-cluster-access-kubeconfig/",
        ),
    )
}


def get_provider_info(provider) -> ProviderInfo:
    """Look up a provider by enum member or name.

    Raises:
        KeyError: for unknown providers
    """
    if isinstance(provider, CloudResourceProvider):
        return _CATALOG[provider]
    name = str(provider).strip().lower()
    for info in _CATALOG.values():
        if name == info.provider.value or name in info.aliases:
            return info
    raise KeyError(f"unknown provider '{provider}'")


def find_provider_info(provider) -> Optional[ProviderInfo]:
    try:
        return get_provider_info(provider)
    except KeyError:
        return None


def all_providers() -> List[ProviderInfo]:
    """Every catalog entry, in enum declaration order."""
    return [_CATALOG[p] for p in CloudResourceProvider]
