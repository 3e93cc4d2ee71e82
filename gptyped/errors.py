"""
Typed failure types for the prompter. Every failure carries a FailureKind for matching and logging.
"""
from __future__ import annotations

import json
from enum import Enum
from typing import Any, Mapping, Sequence


class FailureKind(str, Enum):
    """Strongly-typed failure kind for matching and logging. Not free-form strings."""

    PROMPTER_ERROR = "PROMPTER_ERROR"
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    SCHEMA_MISMATCH = "SCHEMA_MISMATCH"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class PrompterError(Exception):
    """Base type for all prompter failures."""

    failure_type: FailureKind = FailureKind.PROMPTER_ERROR
    reason: str = ""

    def __init__(self, reason: str, failure_type: FailureKind | None = None) -> None:
        self.reason = reason
        if failure_type is not None:
            self.failure_type = failure_type
        super().__init__(reason)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(failure_type={self.failure_type!r}, reason={self.reason!r})"


class TransportFailure(PrompterError):
    """Provider or network failure raised by a transport. Never raised or wrapped by the pipeline itself."""

    failure_type = FailureKind.TRANSPORT_FAILURE

    def __init__(self, reason: str, status_code: int = -1) -> None:
        super().__init__(reason)
        self.status_code = status_code

    @property
    def is_http_error(self) -> bool:
        """True if this represents an HTTP error (status code > 0)."""
        return self.status_code > 0


class MalformedResponse(PrompterError, json.JSONDecodeError):
    """The JSON candidate extracted from the reply is not valid JSON.

    A json.JSONDecodeError (and so a ValueError): `msg`, `doc`, `pos`, `lineno` and `colno`
    behave as they do for the decoder's own error. `text` is the candidate that failed.
    """

    failure_type = FailureKind.MALFORMED_RESPONSE

    def __init__(self, reason: str, text: str, pos: int = 0) -> None:
        json.JSONDecodeError.__init__(self, reason, text, pos)
        self.reason = reason
        self.text = text

    @classmethod
    def from_decode_error(cls, exc: json.JSONDecodeError, text: str) -> "MalformedResponse":
        return cls(f"Invalid JSON: {exc.msg}", text, pos=exc.pos)


class SchemaMismatch(PrompterError, ValueError):
    """Parsed object was rejected by the validation schema.

    `errors` holds field-level diagnostics shaped like pydantic's
    ValidationError.errors(): mappings with at least `loc`, `msg` and `type`.
    """

    failure_type = FailureKind.SCHEMA_MISMATCH

    def __init__(self, reason: str, errors: Sequence[Mapping[str, Any]] = ()) -> None:
        super().__init__(reason)
        self.errors = [dict(e) for e in errors]

    @property
    def locations(self) -> list[tuple[Any, ...]]:
        """Paths of every failing field, in diagnostic order."""
        return [tuple(e.get("loc", ())) for e in self.errors]


class ConfigurationError(PrompterError, ValueError):
    """The builder was handed a value the prompter cannot work with."""

    failure_type = FailureKind.CONFIGURATION_ERROR
