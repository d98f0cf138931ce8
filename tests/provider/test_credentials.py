import pytest
from pydantic import ValidationError

from openmcf.provider.credentials import (
    AwsProviderConfig,
    AzureProviderConfig,
    CivoProviderConfig,
    CloudflareAuthScheme,
    CloudflareProviderConfig,
    DigitalOceanProviderConfig,
    KubernetesProviderConfig,
)


class TestCredentialRecords:
    """Tests for per-provider credential validation."""

    def test_snake_and_camel_case(self):
        snake = AzureProviderConfig.model_validate(
            {"client_id": "c", "client_secret": "s", "tenant_id": "t", "subscription_id": "sub"}
        )
        camel = AzureProviderConfig.model_validate(
            {"clientId": "c", "clientSecret": "s", "tenantId": "t", "subscriptionId": "sub"}
        )
        assert snake == camel

    def test_missing_field(self):
        with pytest.raises(ValidationError):
            AzureProviderConfig.model_validate({"client_id": "c"})

    def test_empty_value_rejected(self):
        with pytest.raises(ValidationError):
            AwsProviderConfig(access_key_id="", secret_access_key="s", region="us-east-1")

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            CivoProviderConfig.model_validate({"api_token": "t", "token": "t"})

    def test_region_may_be_numeric(self):
        config = DigitalOceanProviderConfig.model_validate({"api_token": "t", "default_region": 1})
        assert config.default_region == 1

    def test_kubernetes_context_optional(self):
        assert KubernetesProviderConfig(kubeconfig="~/.kube/config").context is None


class TestCloudflareAuthScheme:
    """Tests for the two Cloudflare authentication schemes."""

    def test_api_token_is_default(self):
        config = CloudflareProviderConfig(api_token="t")
        assert config.auth_scheme == CloudflareAuthScheme.API_TOKEN

    @pytest.mark.parametrize("value", [1, "1", "api_token"])
    def test_api_token_scheme(self, value):
        config = CloudflareProviderConfig.model_validate({"auth_scheme": value, "api_token": "t"})
        assert config.auth_scheme == CloudflareAuthScheme.API_TOKEN

    @pytest.mark.parametrize("value", [2, "2", "legacy_api_key"])
    def test_legacy_scheme(self, value):
        config = CloudflareProviderConfig.model_validate(
            {"authScheme": value, "api_key": "k", "email": "ops@example.com"}
        )
        assert config.auth_scheme == CloudflareAuthScheme.LEGACY_API_KEY

    def test_api_token_required(self):
        with pytest.raises(ValidationError, match="api_token is required"):
            CloudflareProviderConfig.model_validate({"auth_scheme": 1})

    def test_legacy_needs_key_and_email(self):
        with pytest.raises(ValidationError, match="api_key and email are required"):
            CloudflareProviderConfig.model_validate({"auth_scheme": 2, "api_key": "k"})
