"""Map credential records to the environment variables provider SDKs read."""

import base64
import binascii
import logging
import tempfile
from pathlib import Path
from typing import Callable, Dict, Optional

from pydantic import BaseModel

from ..exceptions import ProviderSetupFailed
from .credentials import (
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

logger = logging.getLogger(__name__)


def _aws(config: AwsProviderConfig, workdir: Path) -> Dict[str, str]:
    env = {
        "AWS_REGION": config.region,
        "AWS_ACCESS_KEY_ID": config.access_key_id,
        "AWS_SECRET_ACCESS_KEY": config.secret_access_key,
    }
    if config.session_token:
        env["AWS_SESSION_TOKEN"] = config.session_token
    return env


def _azure(config: AzureProviderConfig, workdir: Path) -> Dict[str, str]:
    return {
        "ARM_CLIENT_ID": config.client_id,
        "ARM_CLIENT_SECRET": config.client_secret,
        "ARM_TENANT_ID": config.tenant_id,
        "ARM_SUBSCRIPTION_ID": config.subscription_id,
    }


def decode_base64(value: str, what: str, provider: str) -> str:
    """Decode a base64 credential blob to text.

    Raises:
        ProviderSetupFailed: if the value is not valid base64-encoded UTF-8
    """
    try:
        return base64.b64decode(value, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ProviderSetupFailed(
            provider, f"failed to decode base64 {what}", cause=e
        ) from e


def _gcp(config: GcpProviderConfig, workdir: Path) -> Dict[str, str]:
    env = {
        "GOOGLE_CREDENTIALS": decode_base64(
            config.service_account_key_base64, "service account key", "gcp"
        )
    }
    if config.project_id:
        env["GOOGLE_CLOUD_PROJECT"] = config.project_id
    return env


def _digitalocean(config: DigitalOceanProviderConfig, workdir: Path) -> Dict[str, str]:
    env = {"DIGITALOCEAN_TOKEN": config.api_token}
    if config.spaces_access_id:
        env["SPACES_ACCESS_KEY_ID"] = config.spaces_access_id
    if config.spaces_secret_key:
        env["SPACES_SECRET_ACCESS_KEY"] = config.spaces_secret_key
    return env


def _cloudflare(config: CloudflareProviderConfig, workdir: Path) -> Dict[str, str]:
    if config.auth_scheme == CloudflareAuthScheme.LEGACY_API_KEY:
        return {"CLOUDFLARE_API_KEY": config.api_key, "CLOUDFLARE_EMAIL": config.email}
    return {"CLOUDFLARE_API_TOKEN": config.api_token}


def _civo(config: CivoProviderConfig, workdir: Path) -> Dict[str, str]:
    return {"CIVO_TOKEN": config.api_token}


def _confluent(config: ConfluentProviderConfig, workdir: Path) -> Dict[str, str]:
    return {
        "CONFLUENT_CLOUD_API_KEY": config.api_key,
        "CONFLUENT_CLOUD_API_SECRET": config.api_secret,
    }


def kubeconfig_path(config: KubernetesProviderConfig) -> Optional[Path]:
    """The kubeconfig file the record names, or None when it carries a base64 blob."""
    path = Path(config.kubeconfig).expanduser()
    try:
        is_file = path.is_file()
    except OSError:
        # base64 blobs longer than NAME_MAX raise ENAMETOOLONG
        is_file = False
    return path if is_file else None


def kubeconfig_content(config: KubernetesProviderConfig) -> str:
    """Return kubeconfig YAML from a path or a base64 blob."""
    path = kubeconfig_path(config)
    if path is not None:
        return path.read_text()
    return decode_base64(config.kubeconfig, "kubeconfig", "kubernetes")


def _kubernetes(config: KubernetesProviderConfig, workdir: Path) -> Dict[str, str]:
    path = kubeconfig_path(config)
    if path is None:
        content = kubeconfig_content(config)
        path = workdir / "kubeconfig"
        path.write_text(content)
        path.chmod(0o600)
        logger.debug(f"Wrote kubeconfig to {path}")
    env = {"KUBECONFIG": str(path)}
    if config.context:
        env["KUBE_CONTEXT"] = config.context
    return env


_MAPPERS: Dict[type, Callable[[BaseModel, Path], Dict[str, str]]] = {
    AwsProviderConfig: _aws,
    AzureProviderConfig: _azure,
    GcpProviderConfig: _gcp,
    DigitalOceanProviderConfig: _digitalocean,
    CloudflareProviderConfig: _cloudflare,
    CivoProviderConfig: _civo,
    ConfluentProviderConfig: _confluent,
    KubernetesProviderConfig: _kubernetes,
}


def credential_environment(config: BaseModel, workdir: Optional[Path] = None) -> Dict[str, str]:
    """Return the environment variables that carry a credential record.

    Args:
        config: A provider credential record
        workdir: Directory for files some providers need (kubeconfig); a fresh
            temporary directory when omitted

    Raises:
        TypeError: if config is not a known credential record
        ProviderSetupFailed: if an encoded credential cannot be decoded
    """
    mapper = _MAPPERS.get(type(config))
    if mapper is None:
        raise TypeError(f"no environment mapping for {type(config).__name__}")
    if workdir is None:
        workdir = Path(tempfile.mkdtemp(prefix="openmcf-"))
    return mapper(config, workdir)
