"""AvikonAI client library.

Async counterparts of the browser-side pieces: the generation client, the
local gallery store, transient object references, the Pixo editor bridge,
notifications, and the session that ties them together.
"""

from .api import AvikonClient
from .blobs import ObjectURLRegistry
from .editor import EditorBridge, EditorStatus
from .errors import (
    AvikonClientError,
    DownloadError,
    EditorNotConfiguredError,
    EditorNotLoadedError,
    GalleryStorageError,
    ImageConversionError,
)
from .gallery import LocalGalleryStore
from .models import GeneratedImage, GenerationResult, GenerationSettings, ServiceStatus
from .notifications import Notification, NotificationCenter
from .session import GenerationSession

__all__ = [
    "AvikonClient",
    "AvikonClientError",
    "DownloadError",
    "EditorBridge",
    "EditorNotConfiguredError",
    "EditorNotLoadedError",
    "EditorStatus",
    "GalleryStorageError",
    "GeneratedImage",
    "GenerationResult",
    "GenerationSession",
    "GenerationSettings",
    "ImageConversionError",
    "LocalGalleryStore",
    "Notification",
    "NotificationCenter",
    "ObjectURLRegistry",
    "ServiceStatus",
]
