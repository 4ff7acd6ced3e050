"""Client-side error types.

These are conditions the client detects locally.  The generation session
turns each of them into a user notification; nothing here is retried.
"""


class AvikonClientError(Exception):
    """Base class for client-side failures with a user-facing message."""

    pass


class ImageConversionError(AvikonClientError):
    """An image reference could not be turned into bytes or a data URL."""

    pass


class GalleryStorageError(AvikonClientError):
    """The gallery file could not be written."""

    pass


class DownloadError(AvikonClientError):
    """An image could not be written to the requested destination."""

    pass


class EditorNotConfiguredError(AvikonClientError):
    """No Pixo API key is configured."""

    pass


class EditorNotLoadedError(AvikonClientError):
    """The Pixo bridge script has not been loaded (or failed to load)."""

    pass
