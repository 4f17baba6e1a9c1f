"""
Logging configuration for the state proof verifier.

Provides structured JSON logging for audit trails and debugging.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Dict, Optional

# Context variable for request ID tracking
request_id_var: ContextVar[str] = ContextVar('request_id', default='')


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    One JSON object per line, suitable for log aggregation.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = get_request_id()
        if request_id:
            log_data["request_id"] = request_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        return json.dumps(log_data)


class AuditLogger:
    """
    Logger for verification audit events.

    Records who asked for which transaction and what the outcome was.
    Never logs key material or signature bytes.
    """

    def __init__(self, name: str = "stateproof.audit"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, event_type: str, **kwargs) -> None:
        if not self._logger.isEnabledFor(level):
            return

        extra = {
            "event_type": event_type,
            "request_id": request_id_var.get(),
            **kwargs
        }

        record = self._logger.makeRecord(
            self._logger.name,
            level,
            "",
            0,
            f"{event_type}: {kwargs.get('message', '')}",
            (),
            None
        )
        record.extra_fields = extra
        self._logger.handle(record)

    def verification_request(self, transaction_id: str, payload_size: Optional[int] = None) -> None:
        """Log a verification request."""
        self._log(
            logging.INFO,
            "VERIFICATION_REQUEST",
            transaction_id=transaction_id,
            payload_size=payload_size,
            message=f"State proof verification requested for {transaction_id}"
        )

    def verification_result(
        self,
        transaction_id: str,
        verified: bool,
        error_code: Optional[str] = None,
        tally: Optional[Dict[str, int]] = None
    ) -> None:
        """Log the outcome of a verification."""
        level = logging.INFO if verified else logging.WARNING
        self._log(
            level,
            "VERIFICATION_RESULT",
            transaction_id=transaction_id,
            verified=verified,
            error_code=error_code,
            tally=tally,
            message=f"State proof {'verified' if verified else 'rejected'} for {transaction_id}"
        )

    def node_skipped(self, node_id: str, reason: str) -> None:
        """Log a signature file that did not take part in the tally."""
        self._log(
            logging.WARNING,
            "NODE_SKIPPED",
            node_id=node_id,
            reason=reason,
            message=f"Node {node_id} skipped: {reason}"
        )


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatting
        log_file: Optional file path for log output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    # stderr keeps stdout free for command output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def set_request_id(request_id: Optional[str] = None) -> str:
    """
    Set the request ID for the current context.

    Args:
        request_id: Request ID to set, or None to generate one

    Returns:
        The request ID that was set
    """
    if request_id is None:
        request_id = str(uuid.uuid4())
    request_id_var.set(request_id)
    return request_id


def get_request_id() -> str:
    """Get the current request ID."""
    return request_id_var.get()


# Global audit logger instance
audit_log = AuditLogger()
