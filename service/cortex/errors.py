"""
Domain errors.

Services raise these; the API layer turns them into HTTP responses (see main.py).
"""


class CortexError(Exception):
    """Base class for all service errors."""
    status_code = 500


class ExtractionError(CortexError):
    """The model returned no usable structured output."""


class EmbeddingError(CortexError):
    """The embedding endpoint returned no vector."""


class TranscriptionError(CortexError):
    """Audio could not be fetched or transcribed."""


class IngestionError(CortexError):
    """The note could not be persisted as an interaction."""


class ContactNotFoundError(CortexError):
    status_code = 404

    def __init__(self, contact_id: str):
        super().__init__(f"Contact {contact_id} not found")
        self.contact_id = contact_id
