"""Generation pipeline."""

from .dedup import DedupGate
from .orchestrator import PipelineOrchestrator, RunState, RunSummary, TopicResult

__all__ = [
    "DedupGate",
    "PipelineOrchestrator",
    "RunState",
    "RunSummary",
    "TopicResult",
]
