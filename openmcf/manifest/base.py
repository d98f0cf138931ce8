"""Common manifest envelope, metadata and foreign-key references.

Every resource manifest has the same four top-level fields:

    apiVersion: digital-ocean.openmcf.org/v1
    kind: DigitalOceanVpc
    metadata:
      name: test-vpc
    spec:
      region: nyc3

Field names are camelCase on the wire and snake_case in Python; both forms
are accepted when building a model.
"""

from typing import Any, ClassVar, Dict, Iterable, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)
from pydantic.alias_generators import to_camel

from ..exceptions import UnresolvedReference
from .enums import CloudResourceProvider

DEFAULT_MARKER = "openmcf_default"

METADATA_NAME_PATTERN = r"^[A-Za-z0-9]([-A-Za-z0-9]{0,61}[A-Za-z0-9])?$"


class SpecModel(BaseModel):
    """Base for every manifest record: camelCase aliases, unknown fields rejected."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        use_enum_values=False,
    )


def default_field(value: Any, description: str = "", **kwargs: Any) -> Any:
    """Declare an optional field together with the value applied when it is unset.

    The field itself defaults to None so that "unset" stays distinguishable;
    the declared default is recorded in the JSON schema and read back with
    declared_default().
    """
    extra = dict(kwargs.pop("json_schema_extra", None) or {})
    extra[DEFAULT_MARKER] = value
    return Field(default=None, description=description, json_schema_extra=extra, **kwargs)


def declared_default(model: type, field_name: str) -> Any:
    """Return the default declared with default_field() for a model field."""
    info = model.model_fields[field_name]
    extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
    if DEFAULT_MARKER not in extra:
        raise KeyError(f"{model.__name__}.{field_name} declares no default")
    return extra[DEFAULT_MARKER]


class ValueFromRef(SpecModel):
    """Pointer to an output exported by another resource's stack."""

    kind: str = Field(min_length=1, description="Kind of the referenced resource")
    name: str = Field(min_length=1, description="metadata.name of the referenced resource")
    output_key: str = Field(
        min_length=1,
        validation_alias=AliasChoices("outputKey", "output_key", "fieldPath", "field_path"),
        description="Output key exported by the referenced module",
    )
    env: Optional[str] = Field(default=None, description="Environment of the referenced resource")


class StringValueOrRef(SpecModel):
    """A string that is either given literally or resolved from another stack.

    Exactly one of value / value_from is populated. The orchestrator resolves
    references before a module runs, so inside a module only get_value() is used.
    """

    value: Optional[str] = None
    value_from: Optional[ValueFromRef] = None

    @model_validator(mode="before")
    @classmethod
    def accept_plain_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"value": data}
        return data

    @model_validator(mode="after")
    def check_exactly_one(self) -> "StringValueOrRef":
        if (self.value is None) == (self.value_from is None):
            raise ValueError("exactly one of 'value' or 'valueFrom' must be set")
        return self

    @classmethod
    def of(cls, value: str) -> "StringValueOrRef":
        return cls(value=value)

    @classmethod
    def ref(cls, kind: str, name: str, output_key: str) -> "StringValueOrRef":
        return cls(value_from=ValueFromRef(kind=kind, name=name, output_key=output_key))

    @property
    def is_reference(self) -> bool:
        return self.value is None

    def get_value(self) -> str:
        """Return the literal value.

        Raises:
            UnresolvedReference: if the reference was not resolved upstream
        """
        if self.value is not None:
            return self.value
        ref = self.value_from
        raise UnresolvedReference(ref.kind, ref.name, ref.output_key)

    def resolved(self, value: str) -> "StringValueOrRef":
        """Return a literal copy carrying the value a reference resolved to."""
        return StringValueOrRef(value=value)


def optional_value(ref: Optional[StringValueOrRef]) -> str:
    """get_value() for optional reference fields; empty string when unset."""
    if ref is None:
        return ""
    return ref.get_value()


def to_string_array(refs: Iterable[Optional[StringValueOrRef]]) -> List[str]:
    """Resolve a list of references, skipping unset and empty entries."""
    values = []
    for ref in refs:
        if ref is None:
            continue
        value = ref.get_value()
        if value:
            values.append(value)
    return values


class CloudResourceMetadata(SpecModel):
    """Metadata shared by every manifest."""

    name: str = Field(
        min_length=1,
        max_length=63,
        pattern=METADATA_NAME_PATTERN,
        description="Stable, DNS-label-safe name; seeds the engine's logical resource name",
    )
    id: Optional[str] = Field(default=None, description="Externally assigned identifier")
    org: Optional[str] = Field(default=None, description="Owning organization")
    env: Optional[str] = Field(default=None, description="Deployment environment")
    labels: Dict[str, str] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)


class Manifest(SpecModel):
    """Envelope shared by every resource kind.

    Subclasses set KIND, API_VERSION and PROVIDER and declare a typed `spec`.
    """

    KIND: ClassVar[str] = ""
    API_VERSION: ClassVar[str] = ""
    PROVIDER: ClassVar[Optional[CloudResourceProvider]] = None

    api_version: str
    kind: str
    metadata: CloudResourceMetadata

    @model_validator(mode="before")
    @classmethod
    def fill_gvk(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            if "apiVersion" not in data and "api_version" not in data:
                data["apiVersion"] = cls.API_VERSION
            data.setdefault("kind", cls.KIND)
        return data

    @model_validator(mode="after")
    def check_gvk(self) -> "Manifest":
        if self.kind != self.KIND:
            raise ValueError(f"kind must be '{self.KIND}', got '{self.kind}'")
        if self.api_version != self.API_VERSION:
            raise ValueError(
                f"apiVersion must be '{self.API_VERSION}' for {self.KIND}, got '{self.api_version}'"
            )
        return self
