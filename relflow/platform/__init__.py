"""Operating-system helpers: subprocess execution and file writes."""

from relflow.platform.files import atomic_write_text, write_json
from relflow.platform.process import ProcessError, run, run_streaming

__all__ = ["ProcessError", "atomic_write_text", "run", "run_streaming", "write_json"]
