"""Public SDK surface for catalyst-sb.

This module provides a stable import path for SDK users.
It re-exports the primary client and typed option models.
"""

from __future__ import annotations

from core.config import CatalystConfig
from core.types import PushOptions, PushSummary
from ingest.pipeline import push_fund_data
from store.catalyst_sdk import CatalystClient

__all__ = [
    "CatalystClient",
    "CatalystConfig",
    "PushOptions",
    "PushSummary",
    "push_fund_data",
]
