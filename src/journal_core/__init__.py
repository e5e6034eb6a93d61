"""Journal core: note storage, summary prompts and execution timing."""

from .performance import CsvLedger, ExecutionRecord, ExecutionTimer, Mode, PerfConfig
from .prompts import build_summary_prompt

__all__ = [
    "CsvLedger",
    "ExecutionRecord",
    "ExecutionTimer",
    "Mode",
    "PerfConfig",
    "build_summary_prompt",
]
