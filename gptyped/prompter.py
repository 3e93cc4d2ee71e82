"""
Main prompting logic. Contract boundary: send() never returns raw LLM output, only objects that
passed the validator. The transport is injected, so tests need no network.
"""
from __future__ import annotations

import asyncio
import copy
import json
import logging
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from gptyped.config import (
    DiagnosticSink,
    ObjectHook,
    PrompterConfig,
    PrompterOptions,
    Stage,
    TextHook,
    stderr_sink,
)
from gptyped.errors import ConfigurationError, MalformedResponse
from gptyped.parsing import CodeBlockParser, extract_code_block, sanitize_quotes
from gptyped.prompt import build_prompt
from gptyped.schemas import Err, as_validator
from gptyped.transport import as_transport

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _reject_constant(name: str, doc: str) -> Any:
    # NaN, Infinity and -Infinity are accepted by json.loads but are not JSON.
    raise json.JSONDecodeError(f"Non-standard JSON constant {name!r}", doc, max(doc.find(name), 0))


class ObjectPrompter(Generic[T]):
    """
    Turns an input payload into a validated T through one LLM exchange.

    Pipeline: build prompt -> request hook -> transport -> response hook -> sanitize quotes
    -> extract fenced block (else whole reply) -> json hook -> json.loads -> object hook -> validate.
    No retries and no state between calls; concurrent send() calls share only the frozen config.
    """

    def __init__(self, config: PrompterConfig) -> None:
        self._config = config

    @property
    def config(self) -> PrompterConfig:
        return self._config

    def build_prompt(self, payload: Any) -> str:
        cfg = self._config
        return build_prompt(
            payload,
            cfg.descriptor,
            metaprompt=cfg.metaprompt,
            reminder=cfg.reminder,
            memory=cfg.memory,
        )

    def _trace(self, stage: Stage, message: str) -> None:
        if self._config.options.verbose:
            self._config.sink(stage, message)

    async def send(self, payload: Any) -> T:
        """
        Prompt the model with `payload` and return the validated object.

        Raises whatever the transport raises, unchanged; MalformedResponse when the reply holds
        no parseable JSON; SchemaMismatch when the parsed object fails validation.
        """
        cfg = self._config
        prompt = self.build_prompt(payload)

        self._trace(Stage.REQUEST, "New request")
        if cfg.options.log_prompt:
            cfg.sink(Stage.PROMPT, prompt)
        self._trace(Stage.TRANSPORT, "Awaiting response...")

        request = cfg.request_hook(prompt) if cfg.request_hook else prompt
        raw = await cfg.transport.send_text(request)
        if cfg.response_hook:
            raw = cfg.response_hook(raw)
        self._trace(Stage.TRANSPORT, "Response received")

        self._trace(Stage.SANITIZE, "Replacing typographic quotes")
        sanitized = sanitize_quotes(raw)

        self._trace(Stage.EXTRACT, "Looking for a fenced code block")
        parser: CodeBlockParser = cfg.code_block_parser or extract_code_block
        block = parser(sanitized)
        candidate = block if block is not None else sanitized
        if cfg.json_hook:
            candidate = cfg.json_hook(candidate)

        self._trace(Stage.PARSE, "Parsing JSON")
        try:
            obj = json.loads(candidate, parse_constant=lambda name: _reject_constant(name, candidate))
        except json.JSONDecodeError as e:
            logger.debug("reply is not valid JSON: %s", e)
            if cfg.options.verbose:
                cfg.sink(Stage.PARSE, "Reply is not valid JSON. Sanitized reply follows:")
                cfg.sink(Stage.PARSE, sanitized)
            raise MalformedResponse.from_decode_error(e, candidate) from e
        self._trace(Stage.PARSE, "JSON parsed")

        if cfg.object_hook:
            obj = cfg.object_hook(obj)

        self._trace(Stage.VALIDATE, "Validating against schema")
        result = cfg.validator.validate(obj)
        if isinstance(result, Err):
            logger.debug("schema mismatch: %s", result.error.reason)
            if cfg.options.verbose:
                cfg.sink(Stage.VALIDATE, f"Object does not match schema: {result.error.errors}")
            raise result.error

        self._trace(Stage.DONE, "Result is valid. Returning")
        return result.value

    def send_sync(self, payload: Any) -> T:
        """Run send() to completion on a fresh event loop. Not for use inside a running loop."""
        return asyncio.run(self.send(payload))

    def __repr__(self) -> str:
        cfg = self._config
        return f"ObjectPrompter(transport={cfg.transport!r}, validator={cfg.validator!r})"


class PrompterBuilder:
    """
    Collects prompter configuration, then build() freezes it into an ObjectPrompter.

    transport: a TextTransport or a plain send function (sync or async).
    validator: a Validator, a pydantic-compatible type, or a JSON Schema mapping.
    descriptor: the output shape shown to the model, as a mapping.
    """

    def __init__(self, transport: Any, validator: Any, descriptor: Mapping[str, Any]) -> None:
        self._transport = transport
        self._validator = validator
        self._descriptor = descriptor
        self._metaprompt: str | None = None
        self._reminder: str | None = None
        self._memory: str | None = None
        self._code_block_parser: CodeBlockParser | None = None
        self._request_hook: TextHook | None = None
        self._response_hook: TextHook | None = None
        self._json_hook: TextHook | None = None
        self._object_hook: ObjectHook | None = None
        self._options = PrompterOptions()
        self._sink: DiagnosticSink = stderr_sink

    def with_metaprompt(self, metaprompt: str | None) -> PrompterBuilder:
        """Instructions placed at the very top of the prompt."""
        self._metaprompt = metaprompt
        return self

    def with_reminder(self, reminder: str | None) -> PrompterBuilder:
        self._reminder = reminder
        return self

    def with_memory(self, memory: str | None) -> PrompterBuilder:
        """Caller-held context spliced in verbatim; the model keeps no history of its own."""
        self._memory = memory
        return self

    def with_options(self, options: PrompterOptions | None = None, **overrides: bool) -> PrompterBuilder:
        base = options if options is not None else self._options
        if not overrides:
            self._options = base
            return self
        try:
            self._options = PrompterOptions(**{**base.model_dump(), **overrides})
        except ValidationError as e:
            raise ConfigurationError(f"Invalid prompter options {sorted(overrides)}: {e}") from e
        return self

    def with_code_block_parser(self, parser: CodeBlockParser | None) -> PrompterBuilder:
        """Replace the fenced-block extractor. The parser returns None when nothing was found."""
        self._code_block_parser = parser
        return self

    def with_request_interceptor(self, hook: TextHook | None) -> PrompterBuilder:
        """Transform the built prompt right before it goes to the transport."""
        self._request_hook = hook
        return self

    def with_response_interceptor(self, hook: TextHook | None) -> PrompterBuilder:
        """Transform the raw reply before quote sanitizing."""
        self._response_hook = hook
        return self

    def with_json_interceptor(self, hook: TextHook | None) -> PrompterBuilder:
        """Transform the JSON candidate text before parsing."""
        self._json_hook = hook
        return self

    def with_object_interceptor(self, hook: ObjectHook | None) -> PrompterBuilder:
        """Transform the parsed object before validation."""
        self._object_hook = hook
        return self

    def with_diagnostic_sink(self, sink: DiagnosticSink | None) -> PrompterBuilder:
        """Where verbose and log_prompt output goes. None restores the stderr sink."""
        self._sink = sink if sink is not None else stderr_sink
        return self

    def build(self) -> ObjectPrompter[Any]:
        if self._transport is None:
            raise ConfigurationError("A transport is required")
        if self._validator is None:
            raise ConfigurationError("A validator is required")
        if not isinstance(self._descriptor, Mapping):
            raise ConfigurationError(
                f"descriptor must be a mapping, got {type(self._descriptor).__name__}"
            )
        hooks = {
            "code_block_parser": self._code_block_parser,
            "request_hook": self._request_hook,
            "response_hook": self._response_hook,
            "json_hook": self._json_hook,
            "object_hook": self._object_hook,
            "sink": self._sink,
        }
        for name, hook in hooks.items():
            if hook is not None and not callable(hook):
                raise ConfigurationError(f"{name} must be callable, got {type(hook).__name__}")

        config = PrompterConfig(
            transport=as_transport(self._transport),
            validator=as_validator(self._validator),
            descriptor=copy.deepcopy(dict(self._descriptor)),
            metaprompt=self._metaprompt,
            reminder=self._reminder,
            memory=self._memory,
            options=self._options,
            **hooks,
        )
        logger.debug("built prompter: validator=%r options=%r", config.validator, config.options)
        return ObjectPrompter(config)
