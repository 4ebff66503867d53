"""
Background workers for non-blocking operations.

Provides QThread-based workers for:
- Image capture, text recognition and explanation
- Highlighting of very large inputs

All workers use Qt signals for thread-safe communication
with the UI thread.
"""

from code_explainer.workers.base_worker import (
    BaseWorker,
    WorkerSignals,
    WorkerState,
    WorkerThread,
)
from code_explainer.workers.explain_worker import (
    ExplainWorker,
    ImageExplainWorker,
    HighlightWorker,
)

__all__ = [
    # Base
    'BaseWorker',
    'WorkerSignals',
    'WorkerState',
    'WorkerThread',
    # Explain
    'ExplainWorker',
    'ImageExplainWorker',
    'HighlightWorker',
]
