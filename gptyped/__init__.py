"""
gptyped: typed objects from LLM text completions. Prompt, parse and validate behind a strict contract.
"""
from gptyped.config import PrompterConfig, PrompterOptions, Stage, stderr_sink
from gptyped.errors import (
    ConfigurationError,
    FailureKind,
    MalformedResponse,
    PrompterError,
    SchemaMismatch,
    TransportFailure,
)
from gptyped.parsing import extract_code_block, sanitize_quotes
from gptyped.prompt import build_prompt
from gptyped.prompter import ObjectPrompter, PrompterBuilder
from gptyped.schemas import Err, JSONSchemaValidator, Ok, PydanticValidator, Result, Validator
from gptyped.transport import CallableTransport, TextTransport

__all__ = [
    "ObjectPrompter",
    "PrompterBuilder",
    "PrompterConfig",
    "PrompterOptions",
    "Stage",
    "stderr_sink",
    "build_prompt",
    "extract_code_block",
    "sanitize_quotes",
    "Validator",
    "PydanticValidator",
    "JSONSchemaValidator",
    "Result",
    "Ok",
    "Err",
    "TextTransport",
    "CallableTransport",
    "PrompterError",
    "FailureKind",
    "TransportFailure",
    "MalformedResponse",
    "SchemaMismatch",
    "ConfigurationError",
]
