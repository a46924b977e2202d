"""Observability for pipeline runs - logging setup and run events."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table

LOGGER_NAME = "resumeforge"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure the package logger once; later calls only adjust the level."""
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger


@dataclass
class RunEvent:
    """A single event in a pipeline run."""

    timestamp: datetime
    event_type: str  # "step_start", "step_end", "model_request", "error"
    data: Dict[str, Any]
    duration_ms: Optional[float] = None
    tokens_used: Optional[int] = None


class RunObserver:
    """
    Records what happened during one run.

    Steps, model requests and errors are kept as events and mirrored to the
    ``resumeforge`` logger. ``print_summary`` renders them as a table.
    """

    def __init__(self, console: Optional[Console] = None):
        self.events: List[RunEvent] = []
        self.console = console or Console()
        self.logger = logging.getLogger(f"{LOGGER_NAME}.run")

    def log_step_start(self, step: int, name: str) -> None:
        self.events.append(RunEvent(timestamp=datetime.now(), event_type="step_start", data={"step": step, "name": name}))
        self.logger.info("Step %d started: %s", step, name)

    def log_step_end(self, step: int, name: str, duration_ms: float) -> None:
        self.events.append(
            RunEvent(
                timestamp=datetime.now(),
                event_type="step_end",
                data={"step": step, "name": name},
                duration_ms=duration_ms,
            )
        )
        self.logger.info("Step %d completed: %s (%.2fms)", step, name, duration_ms)

    def log_model_request(
        self,
        model: str,
        purpose: str,
        prompt_chars: int,
        duration_ms: float,
        tokens: Optional[int] = None,
        success: bool = True,
    ) -> None:
        """
        Log one request to the model gateway.

        Args:
            model: Model name (e.g., "gpt-4o")
            purpose: Record kind being requested
            prompt_chars: Length of system prompt plus user prompt
            duration_ms: Request duration in milliseconds
            tokens: Total tokens reported by the provider, if any
            success: Whether a usable reply came back
        """
        self.events.append(
            RunEvent(
                timestamp=datetime.now(),
                event_type="model_request",
                data={"model": model, "purpose": purpose, "prompt_chars": prompt_chars, "success": success},
                duration_ms=duration_ms,
                tokens_used=tokens,
            )
        )
        self.logger.info(
            "LLM: %s | %s | %d prompt chars | %s tokens | %.2fms",
            model,
            purpose,
            prompt_chars,
            tokens if tokens is not None else "?",
            duration_ms,
        )

    def log_error(self, error_type: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.events.append(
            RunEvent(
                timestamp=datetime.now(),
                event_type="error",
                data={"error_type": error_type, "message": message, "context": context or {}},
            )
        )
        self.logger.error("Error (%s): %s", error_type, message)

    def get_stats(self) -> Dict[str, Any]:
        model_requests = [e for e in self.events if e.event_type == "model_request"]
        steps = [e for e in self.events if e.event_type == "step_end"]
        return {
            "event_count": len(self.events),
            "steps": len(steps),
            "model_requests": len(model_requests),
            "errors": sum(1 for e in self.events if e.event_type == "error"),
            "total_tokens": sum(e.tokens_used or 0 for e in model_requests),
            "total_duration_ms": sum(e.duration_ms or 0 for e in steps),
        }

    def print_summary(self) -> None:
        """Print a table of step timings and totals."""
        table = Table(title="Run summary", show_lines=False)
        table.add_column("Event")
        table.add_column("Detail")
        table.add_column("Duration", justify="right")

        for event in self.events:
            if event.event_type == "step_end":
                table.add_row(f"Step {event.data['step']}", event.data["name"], f"{event.duration_ms:.0f}ms")
            elif event.event_type == "model_request":
                detail = f"{event.data['model']} ({event.data['purpose']})"
                if event.tokens_used is not None:
                    detail += f", {event.tokens_used:,} tokens"
                table.add_row("Model", detail, f"{event.duration_ms:.0f}ms")
            elif event.event_type == "error":
                table.add_row("Error", f"{event.data['error_type']}: {event.data['message']}", "", style="red")

        stats = self.get_stats()
        table.add_row(
            "Total",
            f"{stats['model_requests']} model requests, {stats['errors']} errors, {stats['total_tokens']:,} tokens",
            f"{stats['total_duration_ms']:.0f}ms",
            style="bold",
        )
        self.console.print(table)

    def clear(self) -> None:
        self.events.clear()
