"""
Prompter configuration. Everything is fixed at build time; the models below are frozen.
"""
from __future__ import annotations

import logging
import os
import sys
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from gptyped.parsing import CodeBlockParser
from gptyped.schemas import Validator
from gptyped.transport import TextTransport

logger = logging.getLogger("gptyped")

ENV_VERBOSE = "GPTYPED_VERBOSE"
ENV_LOG_PROMPT = "GPTYPED_LOG_PROMPT"
_TRUTHY = {"1", "true", "yes", "on"}


class Stage(str, Enum):
    """Pipeline stage tag attached to every diagnostic message."""

    REQUEST = "request"
    PROMPT = "prompt"
    TRANSPORT = "transport"
    SANITIZE = "sanitize"
    EXTRACT = "extract"
    PARSE = "parse"
    VALIDATE = "validate"
    DONE = "done"


DiagnosticSink = Callable[[Stage, str], None]
TextHook = Callable[[str], str]
ObjectHook = Callable[[Any], Any]


def stderr_sink(stage: Stage, message: str) -> None:
    """Default sink: one `[stage] message` line on stderr, mirrored to the gptyped logger."""
    logger.debug("[%s] %s", stage.value, message)
    print(f"[{stage.value}] {message}", file=sys.stderr)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


class PrompterOptions(BaseModel):
    """Side-channel switches. Neither affects the returned value."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    verbose: bool = Field(default=False, description="Trace every pipeline step through the sink")
    log_prompt: bool = Field(default=False, description="Emit the built prompt through the sink")

    @classmethod
    def from_env(cls) -> "PrompterOptions":
        return cls(verbose=_env_flag(ENV_VERBOSE), log_prompt=_env_flag(ENV_LOG_PROMPT))


class PrompterConfig(BaseModel):
    """Immutable configuration captured by ObjectPrompter. Hooks left as None are pass-through."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    transport: TextTransport
    validator: Validator
    descriptor: Mapping[str, Any]
    metaprompt: Optional[str] = None
    reminder: Optional[str] = None
    memory: Optional[str] = None
    code_block_parser: Optional[CodeBlockParser] = None
    request_hook: Optional[TextHook] = None
    response_hook: Optional[TextHook] = None
    json_hook: Optional[TextHook] = None
    object_hook: Optional[ObjectHook] = None
    options: PrompterOptions = Field(default_factory=PrompterOptions)
    sink: DiagnosticSink = stderr_sink
