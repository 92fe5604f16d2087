"""Parallel execution of analysis tasks."""

from .task import AnalysisTask, create_tasks
from .worker_pool import (
    ExecutionEngine,
    EngineState,
    WorkerConfig,
    default_pool_width,
)

__all__ = [
    "ExecutionEngine",
    "EngineState",
    "WorkerConfig",
    "AnalysisTask",
    "create_tasks",
    "default_pool_width",
]
