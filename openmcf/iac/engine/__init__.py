"""Engine interface and its implementations."""

from .base import EngineContext, ProviderHandle, ResourceHandle
from .recording import OutputRef, RecordedProvider, RecordedResource, RecordingContext

__all__ = [
    "EngineContext",
    "OutputRef",
    "ProviderHandle",
    "RecordedProvider",
    "RecordedResource",
    "RecordingContext",
    "ResourceHandle",
]
