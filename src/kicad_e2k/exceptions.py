"""Exception hierarchy for the conversion engine.

Each failure class maps to one stage of the per-component pipeline so the
batch orchestrator can report what went wrong without inspecting messages.
"""

from __future__ import annotations

from typing import Any


class E2kError(Exception):
    """Base exception for all converter errors."""

    error_code: str = ""

    def __init__(self, message: str, error_code: str | None = None, **kwargs: Any):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or type(self).error_code or type(self).__name__
        self.__dict__.update(kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a serializable dict."""
        result: dict[str, Any] = {
            "error": True,
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
        }
        result.update(
            {k: v for k, v in self.__dict__.items() if k not in ["message", "error_code"]}
        )
        return result


class ConfigError(E2kError):
    """Raised when conversion options are inconsistent."""

    error_code = "CONFIG_ERROR"

    def __init__(self, message: str, field: str | None = None, **kwargs: Any):
        super().__init__(message, "CONFIG_ERROR", field=field, **kwargs)


class InvalidIdentifierError(E2kError):
    """Raised before any work starts when an LCSC id is malformed."""

    error_code = "INVALID_IDENTIFIER"

    def __init__(self, message: str, lcsc_id: str | None = None, **kwargs: Any):
        super().__init__(message, "INVALID_IDENTIFIER", lcsc_id=lcsc_id, **kwargs)


class FetchError(E2kError):
    """Raised when component data cannot be fetched (network or not found)."""

    error_code = "FETCH_ERROR"

    def __init__(
        self,
        message: str,
        lcsc_id: str | None = None,
        status_code: int | None = None,
        **kwargs: Any,
    ):
        super().__init__(
            message, "FETCH_ERROR", lcsc_id=lcsc_id, status_code=status_code, **kwargs
        )


class ParseError(E2kError):
    """Raised when source data is structurally unparsable."""

    error_code = "PARSE_ERROR"

    def __init__(self, message: str, artifact: str | None = None, **kwargs: Any):
        super().__init__(message, "PARSE_ERROR", artifact=artifact, **kwargs)


class SerializeError(E2kError):
    """Raised when a target entity cannot be rendered.

    Well-formed entities never trigger this; seeing it means a builder
    produced something the serializers do not accept.
    """

    error_code = "SERIALIZE_ERROR"


class MergeError(E2kError):
    """Raised when a library file cannot be read, parsed or written."""

    error_code = "MERGE_ERROR"

    def __init__(self, message: str, path: str | None = None, **kwargs: Any):
        super().__init__(message, "MERGE_ERROR", path=path, **kwargs)


class ModelDownloadError(E2kError):
    """Raised when a 3D mesh cannot be downloaded."""

    error_code = "MODEL_DOWNLOAD_ERROR"

    def __init__(self, message: str, uuid: str | None = None, **kwargs: Any):
        super().__init__(message, "MODEL_DOWNLOAD_ERROR", uuid=uuid, **kwargs)


class ModelTranscodeError(E2kError):
    """Raised when a 3D mesh cannot be transcoded."""

    error_code = "MODEL_TRANSCODE_ERROR"

    def __init__(self, message: str, model_format: str | None = None, **kwargs: Any):
        super().__init__(message, "MODEL_TRANSCODE_ERROR", model_format=model_format, **kwargs)


class ConversionError(E2kError):
    """Raised when a component fails with an error outside this hierarchy."""

    error_code = "CONVERSION_ERROR"

    def __init__(self, message: str, lcsc_id: str | None = None, **kwargs: Any):
        super().__init__(message, "CONVERSION_ERROR", lcsc_id=lcsc_id, **kwargs)


__all__ = [
    "E2kError",
    "ConfigError",
    "InvalidIdentifierError",
    "FetchError",
    "ParseError",
    "SerializeError",
    "MergeError",
    "ModelDownloadError",
    "ModelTranscodeError",
    "ConversionError",
]
