"""Errors raised across service and adapter boundaries."""


class IndexStoreError(RuntimeError):
    """The document index rejected a request or could not be reached."""


class BlobStoreError(RuntimeError):
    """The blob store failed to store or publish an object."""


class ImageMissingError(ValueError):
    """A post was submitted without an image."""


class InvalidTokenError(ValueError):
    """A session token failed signature, expiry or claim checks."""
