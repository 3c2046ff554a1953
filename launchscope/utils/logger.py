"""
Structured logging for Launchscope.

Every pipeline stage logs through a StageLogger so that one scrape (fetch,
locate, repair, resolve, enrich) can be followed by its trace id, and every
fallback between extraction strategies leaves a warning-level record.
"""
import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Dict, List, Optional

import structlog

from launchscope.config import config

trace_id_var: ContextVar[str] = ContextVar("trace_id", default="")


def _new_trace_id() -> str:
    return uuid.uuid4().hex[:8]


def get_trace_id() -> str:
    """Current trace id; one is created on first use in a context."""
    trace_id = trace_id_var.get()
    if not trace_id:
        trace_id = set_trace_id()
    return trace_id


def set_trace_id(trace_id: Optional[str] = None) -> str:
    """Start a new trace (or adopt `trace_id`) for the current context."""
    trace_id = trace_id or _new_trace_id()
    trace_id_var.set(trace_id)
    return trace_id


def add_trace_id(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """structlog processor stamping the trace id on each event."""
    event_dict.setdefault("trace_id", get_trace_id())
    return event_dict


def _log_level() -> int:
    level = logging.getLevelName(config.LOG_LEVEL.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    """Configure structlog once: JSON lines by default, console rendering when LOG_FORMAT=console."""
    renderer = (
        structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        if config.LOG_FORMAT == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_trace_id,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


class StageLogger:
    """
    Logger bound to one pipeline stage.

    Event names are fixed per helper (decision_made, fallback_triggered,
    http_fetch, ...) so log queries work across stages.
    """

    def __init__(self, stage_name: str):
        self.stage_name = stage_name
        self.logger = get_logger(stage_name).bind(stage=stage_name)

    def log_decision(self, decision: str, reason: str, url: Optional[str] = None, **extra):
        """A branch the stage took, with the evidence for it."""
        self.logger.info("decision_made", decision=decision, reason=reason, url=url, **extra)

    def log_action(self, action: str, status: str = "started", **extra):
        self.logger.info(f"action_{status}", action=action, **extra)

    def log_fallback(self, from_source: str, to_source: str, reason: str, **extra):
        """A strategy produced nothing usable and the next one is being tried."""
        self.logger.warning(
            "fallback_triggered",
            from_source=from_source,
            to_source=to_source,
            reason=reason,
            **extra
        )

    def log_error(self, error: str, error_type: str = "unknown", **extra):
        self.logger.error("error_occurred", error=error, error_type=error_type, **extra)

    def log_fetch(self, url: str, status_code: Optional[int], result: str, **extra):
        """One HTTP exchange; non-success statuses log at warning level."""
        log = self.logger.info if status_code is not None and status_code < 400 else self.logger.warning
        log("http_fetch", url=url, status_code=status_code, result=result, **extra)

    def log_extraction(self, entity: str, fields_present: List[str], fields_missing: List[str], **extra):
        """Which fields an entity ended up with after every strategy ran."""
        self.logger.info(
            "entity_extracted",
            entity=entity,
            fields_present=fields_present,
            fields_missing=fields_missing,
            coverage=f"{len(fields_present)}/{len(fields_present) + len(fields_missing)}",
            **extra
        )


configure_logging()
