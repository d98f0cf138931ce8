"""
Exception hierarchy for OpenMCF.

Every error raised by the manifest model, the stack-input loader, the module
runtime and the schema linter derives from OpenMCFError. Errors are never
recovered inside a module: each step wraps the failure with a short prefix
naming what it was doing and re-raises, so the CLI can print the full chain.
"""

from typing import Any, Dict, List, Optional


class OpenMCFError(Exception):
    """
    Base exception class for all OpenMCF errors.

    Provides structured error information including context, error codes,
    the wrapped cause and an optional recovery suggestion.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
        recovery_suggestion: Optional[str] = None,
    ) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            context: Optional dictionary with error context
            cause: Optional underlying exception that caused this error
            recovery_suggestion: Optional suggestion for error recovery
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause
        self.recovery_suggestion = recovery_suggestion

    def __str__(self) -> str:
        """Return a formatted error message with context."""
        result = self.message
        if self.error_code:
            result = f"[{self.error_code}] {result}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            result += f" (context: {context_str})"
        if self.cause:
            result += f" (caused by: {self.cause})"
        if self.recovery_suggestion:
            result += f" (suggestion: {self.recovery_suggestion})"
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
            "recovery_suggestion": self.recovery_suggestion,
        }


class BadStackInput(OpenMCFError):
    """Raised when the serialized stack input cannot be turned into a typed record."""

    def __init__(self, detail: str, **kwargs: Any) -> None:
        kwargs.setdefault("error_code", "BAD_STACK_INPUT")
        super().__init__(detail, **kwargs)
        self.detail = detail


class ProviderSetupFailed(OpenMCFError):
    """Raised when a provider handle cannot be built.

    Either the credential record is absent and the provider does not accept
    ambient credentials, or the provider construction itself failed.
    """

    def __init__(
        self, provider: str, message: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = dict(kwargs.get("context") or {})
        context["provider"] = provider
        kwargs["context"] = context
        kwargs.setdefault("error_code", "PROVIDER_SETUP_FAILED")
        kwargs.setdefault(
            "recovery_suggestion",
            f"Pass a {provider} provider config file or export the {provider} "
            "credential environment variables",
        )
        super().__init__(message or f"{provider} provider credentials are missing", **kwargs)
        self.provider = provider


class UnresolvedReference(OpenMCFError):
    """Raised when a foreign-key reference reaches a module without a value."""

    def __init__(self, kind: str, name: str, output_key: str, **kwargs: Any) -> None:
        context = dict(kwargs.get("context") or {})
        context.update({"kind": kind, "name": name, "output_key": output_key})
        kwargs["context"] = context
        kwargs.setdefault("error_code", "UNRESOLVED_REFERENCE")
        kwargs.setdefault(
            "recovery_suggestion",
            "Resolve the reference from the referenced stack outputs before running the module",
        )
        super().__init__(
            f"reference to {kind}/{name}.{output_key} was not resolved", **kwargs
        )
        self.kind = kind
        self.name = name
        self.output_key = output_key


class ValidationFailed(OpenMCFError):
    """Raised when a manifest fails declarative validation."""

    def __init__(self, field: str, reason: str, **kwargs: Any) -> None:
        context = dict(kwargs.get("context") or {})
        context["field"] = field
        kwargs["context"] = context
        kwargs.setdefault("error_code", "VALIDATION_FAILED")
        super().__init__(f"{field}: {reason}", **kwargs)
        self.field = field
        self.reason = reason

    @property
    def errors(self) -> List[Dict[str, Any]]:
        """All validation errors collected for the manifest."""
        return self.context.get("errors", [])


class ResourceCreationFailed(OpenMCFError):
    """Raised when the engine or the provider rejects a resource."""

    def __init__(
        self,
        kind: str,
        name: str,
        cause: Optional[BaseException] = None,
        **kwargs: Any,
    ) -> None:
        context = dict(kwargs.get("context") or {})
        context.update({"kind": kind, "name": name})
        kwargs["context"] = context
        kwargs.setdefault("error_code", "RESOURCE_CREATION_FAILED")
        super().__init__(f"failed to create {kind} {name}", cause=cause, **kwargs)
        self.kind = kind
        self.name = name


class SchemaLintFailed(OpenMCFError):
    """Raised by the schema linter when a manifest definition breaks a rule."""

    def __init__(self, rule: str, location: str, detail: str = "", **kwargs: Any) -> None:
        context = dict(kwargs.get("context") or {})
        context.update({"rule": rule, "location": location})
        kwargs["context"] = context
        kwargs.setdefault("error_code", "SCHEMA_LINT_FAILED")
        super().__init__(detail or f"{location} violates {rule}", **kwargs)
        self.rule = rule
        self.location = location


class ModuleExecutionError(OpenMCFError):
    """Wraps a failure with a prefix naming the module step that failed.

    The prefix is the message itself, e.g. "failed to load stack-input" or
    "failed to setup azure provider"; the wrapped error is kept as cause.
    """

    def __init__(self, message: str, cause: BaseException, **kwargs: Any) -> None:
        kwargs.setdefault("error_code", "MODULE_FAILED")
        super().__init__(message, cause=cause, **kwargs)


def root_cause(error: BaseException) -> BaseException:
    """Follow the chain of wrapped errors down to the original failure."""
    seen = set()
    current = error
    while id(current) not in seen:
        seen.add(id(current))
        nested = getattr(current, "cause", None) or current.__cause__
        if nested is None:
            break
        current = nested
    return current


def error_chain(error: BaseException) -> List[BaseException]:
    """Return the error followed by every error it wraps, outermost first."""
    chain = [error]
    while True:
        nested = getattr(chain[-1], "cause", None) or chain[-1].__cause__
        if nested is None or nested in chain:
            return chain
        chain.append(nested)
