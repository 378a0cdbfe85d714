"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScanConfig:
    """Scan limits and failure policy for the orchestrator."""

    max_messages: int = 500
    fetch_timeout_seconds: float = 30.0
    partial_results: bool = False
