"""
Data Models

PR Diff Annotator 시스템의 핵심 데이터 모델들
"""

from .diff import (
    DEV_NULL,
    ChangeType,
    ChangeLine,
    Hunk,
    DiffFile,
    ModifiedRange,
    ContextWindow,
)
from .review import (
    Side,
    AnchorMode,
    LineComment,
    ReviewResponse,
    AnchoredComment,
    DroppedComment,
    AnchoringResult,
)

__all__ = [
    "DEV_NULL",
    "ChangeType",
    "ChangeLine",
    "Hunk",
    "DiffFile",
    "ModifiedRange",
    "ContextWindow",
    "Side",
    "AnchorMode",
    "LineComment",
    "ReviewResponse",
    "AnchoredComment",
    "DroppedComment",
    "AnchoringResult",
]
