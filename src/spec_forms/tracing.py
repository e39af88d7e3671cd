"""
Tracing configuration for spec-forms.

Engine operations (`set_field_value`, `validate`) run inside a trace and
every field validation inside a span, using the OpenAI Agents SDK tracing
API. Tracing is disabled unless enabled through configuration; processors
below send traces to the log or to a JSON Lines file instead of a remote
dashboard.
"""

import json
import logging
from contextlib import contextmanager
from typing import Any, Iterator

from agents import custom_span, set_tracing_disabled, trace
from agents.tracing import (
    Span,
    Trace,
    TracingProcessor,
    set_trace_processors,
)

logger = logging.getLogger("spec-forms.tracing")


class ConsoleTracingProcessor(TracingProcessor):
    """
    A simple tracing processor that logs traces.

    Useful for development and debugging.
    """

    def __init__(self, verbose: bool = False):
        """
        Initialize the console tracing processor.

        Args:
            verbose: If True, log every span as well.
        """
        self.verbose = verbose

    def on_trace_start(self, trace: Trace) -> None:
        logger.info(f"[TRACE START] {trace.name} (ID: {trace.trace_id[:8]}...)")

    def on_trace_end(self, trace: Trace) -> None:
        logger.info(f"[TRACE END] {trace.name}")

    def on_span_start(self, span: Span[Any]) -> None:
        if self.verbose:
            logger.info(f"  [SPAN START] {span.span_data.export()}")

    def on_span_end(self, span: Span[Any]) -> None:
        if self.verbose:
            logger.info(f"  [SPAN END] {span.span_data.export()}")

    def shutdown(self) -> None:
        pass

    def force_flush(self) -> None:
        pass


class FileTracingProcessor(TracingProcessor):
    """
    A tracing processor that appends finished traces to a JSON Lines file.
    """

    def __init__(self, file_path: str = "traces.jsonl"):
        self.file_path = file_path
        self._current_trace: dict[str, Any] | None = None

    def on_trace_start(self, trace: Trace) -> None:
        self._current_trace = {
            "trace_id": trace.trace_id,
            "name": trace.name,
            "spans": [],
        }

    def on_trace_end(self, trace: Trace) -> None:
        if self._current_trace is not None:
            with open(self.file_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(self._current_trace, default=str) + "\n")
            self._current_trace = None

    def on_span_start(self, span: Span[Any]) -> None:
        pass

    def on_span_end(self, span: Span[Any]) -> None:
        if self._current_trace is not None:
            self._current_trace["spans"].append({
                "span_id": span.span_id,
                "data": span.span_data.export(),
            })

    def shutdown(self) -> None:
        pass

    def force_flush(self) -> None:
        pass


def build_trace_processors(
    console: bool = False,
    verbose: bool = False,
    file_path: str | None = None,
) -> list[TracingProcessor]:
    """Local processors for the requested sinks, in install order."""
    processors: list[TracingProcessor] = []
    if console:
        processors.append(ConsoleTracingProcessor(verbose=verbose))
    if file_path:
        processors.append(FileTracingProcessor(file_path=file_path))
    return processors


def setup_tracing(
    enabled: bool = True,
    console: bool = True,
    verbose: bool = False,
    file_path: str | None = None,
) -> list[TracingProcessor]:
    """
    Route engine traces to the log and/or a JSON Lines file.

    The SDK's own processors, including its remote exporter, are always
    replaced: with no sink selected the processor list is simply empty and
    traces are recorded nowhere.

    Args:
        enabled: Record traces at all. When False the processors are left alone.
        console: Log trace boundaries through the "spec-forms.tracing" logger.
        verbose: Log every span as well.
        file_path: Append finished traces to this file.

    Returns:
        The processors now installed (empty when disabled).

    Example:
        >>> from spec_forms.tracing import setup_tracing
        >>> setup_tracing(console=True, verbose=True)
    """
    if not enabled:
        disable_tracing()
        return []

    processors = build_trace_processors(console=console, verbose=verbose, file_path=file_path)
    set_trace_processors(processors)
    set_tracing_disabled(False)

    if not processors:
        logger.warning("Tracing enabled without a console or file sink; traces are dropped")
    else:
        logger.debug(f"Trace processors installed: {[type(p).__name__ for p in processors]}")
    return processors


def disable_tracing() -> None:
    """Stop recording traces. Installed processors stay in place."""
    set_tracing_disabled(True)


@contextmanager
def traced_operation(
    name: str,
    metadata: dict[str, Any] | None = None,
) -> Iterator[None]:
    """
    Context manager for tracing an engine operation.

    Example:
        >>> with traced_operation("spec-forms.validate", {"form": "signup"}):
        ...     ...
    """
    with trace(name, metadata=metadata):
        yield


@contextmanager
def field_span(name: str, data: dict[str, Any] | None = None) -> Iterator[None]:
    """Span around a single field validation inside a traced operation."""
    with custom_span(name, data=data or {}):
        yield
