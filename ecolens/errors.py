# ecolens/errors.py
class EcoLensError(Exception):
    """Base class for errors raised by the EcoLens+ backend."""


class ValidationError(EcoLensError):
    """Input that cannot be computed on (unknown enum key, bad image data...)."""


class ExternalServiceError(EcoLensError):
    """The AI service or a product database failed or timed out."""


class NotFoundError(EcoLensError):
    """A barcode is unknown to a product database."""
