"""TokenAuditLogger — JSONL audit trail for token lifecycle events.

Every issuance, read and rejection handled by a
:class:`~shopcloud.shop.ShopCloud` instance can be appended as a single JSON
line to a configured log file. Payload contents and secrets are never
written; events carry only the shop id, the event type and small
descriptive details (error counts, section keys, failure reasons).

If no file path is configured the logger keeps events in an in-memory
buffer that can be drained via :meth:`drain_buffer`.
"""
from __future__ import annotations

import datetime
import json
import threading
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class AuditEvent:
    """A single auditable token event.

    Parameters
    ----------
    event_type:
        Short snake_case string identifying the event (e.g. "token_issued").
    shop_id:
        The shop identifier the event belongs to.
    details:
        Arbitrary key-value metadata about the event.
    timestamp:
        UTC datetime of the event. Defaults to now.
    """

    event_type: str
    shop_id: str
    details: dict[str, object] = field(default_factory=dict)
    timestamp: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dictionary suitable for JSON encoding."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type,
            "shop_id": self.shop_id,
            "details": self.details,
        }


class TokenAuditLogger:
    """Append-only JSONL audit logger for token events.

    Thread-safe. Each call to :meth:`log` appends one JSON line to the
    configured file path (or to the in-memory buffer if no path is set).

    Parameters
    ----------
    log_path:
        Path to the JSONL log file. Parent directories are created
        automatically. If None, events are buffered in memory only.
    """

    def __init__(self, log_path: Path | None = None) -> None:
        self._log_path = log_path
        self._buffer: list[str] = []
        self._lock = threading.Lock()

        if log_path is not None:
            log_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def log_path(self) -> Path | None:
        return self._log_path

    # ------------------------------------------------------------------
    # Core logging
    # ------------------------------------------------------------------

    def log(self, event: AuditEvent) -> None:
        """Append an audit event to the log."""
        line = json.dumps(event.to_dict(), separators=(",", ":"))
        with self._lock:
            if self._log_path is not None:
                with self._log_path.open("a", encoding="utf-8") as fh:
                    fh.write(line + "\n")
            else:
                self._buffer.append(line)

    def log_event(self, event_type: str, shop_id: str, **details: object) -> None:
        """Log a simple event without constructing an AuditEvent."""
        self.log(AuditEvent(event_type=event_type, shop_id=shop_id, details=dict(details)))

    # ------------------------------------------------------------------
    # Convenience event loggers
    # ------------------------------------------------------------------

    def log_issued(self, shop_id: str, partner: bool = False, **kwargs: object) -> None:
        """Log a token_issued or partner_token_issued event."""
        self.log_event(
            "partner_token_issued" if partner else "token_issued", shop_id, **kwargs
        )

    def log_payload_rejected(self, shop_id: str, errors: list[dict[str, str]]) -> None:
        """Log a payload that failed validation at issuance.

        Only the section keys are recorded, not the messages or field values.
        """
        sections = sorted({key for record in errors for key in record})
        self.log_event(
            "payload_rejected", shop_id, error_count=len(errors), sections=sections
        )

    def log_read(self, shop_id: str, success: bool, **kwargs: object) -> None:
        """Log a token_read or token_rejected event."""
        self.log_event("token_read" if success else "token_rejected", shop_id, **kwargs)

    # ------------------------------------------------------------------
    # Buffer access
    # ------------------------------------------------------------------

    def drain_buffer(self) -> list[str]:
        """Return and clear the in-memory event buffer.

        Returns
        -------
        list[str]
            List of JSON lines (one per event), oldest first.
        """
        with self._lock:
            events = list(self._buffer)
            self._buffer.clear()
        return events

    def read_log(self, tail: int | None = None) -> list[dict[str, object]]:
        """Read events from the log file (or the buffer when no file is set).

        Parameters
        ----------
        tail:
            If provided, return only the last *tail* events.
        """
        with self._lock:
            if self._log_path is None or not self._log_path.exists():
                lines = list(self._buffer)
            else:
                lines = self._log_path.read_text(encoding="utf-8").splitlines()

        parsed = [json.loads(line) for line in lines if line.strip()]
        if tail is not None:
            return parsed[-tail:] if tail > 0 else []
        return parsed
