"""Exceptions raised by the generation core."""


class GenerationError(Exception):
    """Image generation failed at the vendor boundary.

    The message is user-facing and is also what the API layer inspects to
    pick an error code, so vendor messages are preserved inside it.
    """

    pass


class MalformedVendorResponseError(GenerationError):
    """The vendor answered, but not with the structure we expect.

    Raised by the strict response parser instead of guessing at intent.
    """

    pass


class InvalidReferenceImageError(ValueError):
    """The supplied reference image is not decodable base64."""

    pass
