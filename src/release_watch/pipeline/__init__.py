"""Pipeline orchestration - manual and scheduled release note checks."""

from .diff import diff_entries
from .runner import ReleaseNotePipeline, RunResult, RunState, build_pipeline

__all__ = ["diff_entries", "ReleaseNotePipeline", "RunResult", "RunState", "build_pipeline"]
