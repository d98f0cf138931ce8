"""Provider credential records.

Each provider has its own record with its own validation; there is no shared
base class beyond the pydantic model configuration. Keys are snake_case, which
is how provider config files are written, and camelCase is accepted too.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _CredentialModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class AwsProviderConfig(_CredentialModel):
    account_id: Optional[str] = None
    access_key_id: str = Field(min_length=1)
    secret_access_key: str = Field(min_length=1)
    session_token: Optional[str] = None
    region: str = Field(min_length=1)


class AzureProviderConfig(_CredentialModel):
    client_id: str = Field(min_length=1)
    client_secret: str = Field(min_length=1)
    tenant_id: str = Field(min_length=1)
    subscription_id: str = Field(min_length=1)


class GcpProviderConfig(_CredentialModel):
    service_account_key_base64: str = Field(min_length=1)
    project_id: Optional[str] = None


class DigitalOceanProviderConfig(_CredentialModel):
    api_token: str = Field(min_length=1)
    default_region: Optional[Union[str, int]] = Field(
        default=None, description="Region slug or the numeric region enum value"
    )
    spaces_access_id: Optional[str] = None
    spaces_secret_key: Optional[str] = None


class CloudflareAuthScheme(str, Enum):
    API_TOKEN = "api_token"
    LEGACY_API_KEY = "legacy_api_key"


class CloudflareProviderConfig(_CredentialModel):
    auth_scheme: CloudflareAuthScheme = CloudflareAuthScheme.API_TOKEN
    api_token: Optional[str] = None
    api_key: Optional[str] = None
    email: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def accept_numeric_scheme(cls, data):
        # Config files written for the CLI use 1=API_TOKEN, 2=LEGACY_API_KEY
        if isinstance(data, dict):
            for key in ("auth_scheme", "authScheme"):
                if data.get(key) in (1, "1"):
                    data = {**data, key: CloudflareAuthScheme.API_TOKEN.value}
                elif data.get(key) in (2, "2"):
                    data = {**data, key: CloudflareAuthScheme.LEGACY_API_KEY.value}
        return data

    @model_validator(mode="after")
    def check_scheme(self) -> "CloudflareProviderConfig":
        if self.auth_scheme == CloudflareAuthScheme.API_TOKEN and not self.api_token:
            raise ValueError("api_token is required for the api_token auth scheme")
        if self.auth_scheme == CloudflareAuthScheme.LEGACY_API_KEY and not (
            self.api_key and self.email
        ):
            raise ValueError("api_key and email are required for the legacy_api_key auth scheme")
        return self


class CivoProviderConfig(_CredentialModel):
    api_token: str = Field(min_length=1)
    default_region: Optional[Union[str, int]] = Field(
        default=None, description="Region slug or the numeric region enum value"
    )


class ConfluentProviderConfig(_CredentialModel):
    api_key: str = Field(min_length=1)
    api_secret: str = Field(min_length=1)


class KubernetesProviderConfig(_CredentialModel):
    kubeconfig: str = Field(
        min_length=1, description="Base64-encoded kubeconfig content or a path to a kubeconfig file"
    )
    context: Optional[str] = None
