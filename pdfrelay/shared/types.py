"""Shared types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestContext:
    """Per-request context attached to log records."""

    request_id: str
    client_ip: str | None = None
