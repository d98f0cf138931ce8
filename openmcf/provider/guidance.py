"""User-facing guidance printed when credentials or manifests are wrong."""

from .catalog import ProviderInfo

RESOURCES_DOCS_URL = "https://openmcf.org/docs/resources"


def missing_provider_config_guidance(kind: str, info: ProviderInfo) -> str:
    """Explain both ways of supplying credentials for a resource kind."""
    lines = [f"The {kind} resource requires {info.display_name} credentials.", ""]

    lines.append("Option 1: Set environment variables")
    lines.append("")
    lines.extend("  " + line for line in info.environment_variables_help.split("\n"))

    lines.append("")
    lines.append("Option 2: Create a provider config file")
    lines.append("")
    lines.append(f"  Create '{info.config_file_name}' with:")
    lines.append("")
    lines.extend("    " + line for line in info.config_file_example.split("\n"))
    lines.append("")
    lines.append("  Then run:")
    lines.append("")
    lines.append(f"    openmcf preview -f manifest.yaml -p {info.config_file_name}")

    if info.docs_url:
        lines.append("")
        lines.append(f"For more information: {info.docs_url}")
    return "\n".join(lines) + "\n"


def invalid_provider_config_guidance(info: ProviderInfo, error: BaseException) -> str:
    """Explain the expected provider config layout after a parse failure."""
    lines = [
        f"The provider config file could not be parsed as {info.display_name} credentials.",
        "",
        f"Parse error: {error}",
        "",
        f"Expected format for {info.display_name} provider config:",
        "",
    ]
    lines.extend("  " + line for line in info.config_file_example.split("\n"))
    if info.docs_url:
        lines.append("")
        lines.append(f"For more information: {info.docs_url}")
    return "\n".join(lines) + "\n"


def kind_detection_error_guidance() -> str:
    return f"""The manifest must contain valid 'apiVersion' and 'kind' fields:

  apiVersion: gcp.openmcf.org/v1
  kind: GkeCluster
  metadata:
    name: my-cluster
  spec:
    # ... resource configuration

Check your manifest file for:
  - Missing or misspelled 'apiVersion'
  - Missing or misspelled 'kind'
  - Invalid YAML syntax

For supported resource kinds, see: {RESOURCES_DOCS_URL}"""
