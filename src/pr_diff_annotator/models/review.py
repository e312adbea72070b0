"""
Review Data Models

코드 리뷰 코멘트 및 GitHub 앵커링 관련 데이터 모델들
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Side(str, Enum):
    """코멘트가 달리는 diff 방향"""
    RIGHT = "RIGHT"  # new file
    LEFT = "LEFT"    # old file


class AnchorMode(str, Enum):
    """GitHub 리뷰 코멘트 위치 지정 방식"""
    POSITION = "position"
    LINE = "line"


# Pydantic models for validating language model output
class LineComment(BaseModel):
    """라인 단위 리뷰 코멘트"""
    model_config = ConfigDict(populate_by_name=True)

    path: str
    line: int
    body: str = Field(alias="comment")
    side: Optional[Side] = None  # None: use the configured default side

    @field_validator('path')
    @classmethod
    def validate_path(cls, v):
        if not v.strip():
            raise ValueError('Path cannot be empty')
        return v.strip()

    @field_validator('line')
    @classmethod
    def validate_line(cls, v):
        if v <= 0:
            raise ValueError('Line number must be positive')
        return v

    @field_validator('body')
    @classmethod
    def validate_body(cls, v):
        if not v.strip():
            raise ValueError('Comment body cannot be empty')
        return v.strip()


class ReviewResponse(BaseModel):
    """언어 모델의 전체 리뷰 응답"""
    model_config = ConfigDict(populate_by_name=True)

    summary: str
    comments: List[LineComment] = Field(default_factory=list)
    suggested_action: str = Field(default='comment', alias='suggestedAction')
    confidence: float = 0.0

    @field_validator('suggested_action')
    @classmethod
    def validate_suggested_action(cls, v):
        if v not in {'approve', 'request_changes', 'comment'}:
            raise ValueError('Invalid suggested action')
        return v

    @field_validator('confidence')
    @classmethod
    def validate_confidence(cls, v):
        if not 0 <= v <= 100:
            raise ValueError('Confidence must be between 0 and 100')
        return v


@dataclass
class AnchoredComment:
    """GitHub 리뷰 API에 전달할 수 있는 코멘트"""
    path: str
    body: str
    position: Optional[int] = None
    line: Optional[int] = None
    side: Optional[Side] = None

    def __post_init__(self):
        """데이터 검증"""
        if self.position is None and self.line is None:
            raise ValueError("Anchored comments need a position or a line")
        if self.position is not None and self.line is not None:
            raise ValueError("Anchored comments use either position or line, not both")
        if self.line is not None and self.side is None:
            raise ValueError("Line anchored comments need a side")
        if not self.body.strip():
            raise ValueError("Comment body cannot be empty")

    def to_payload(self) -> Dict[str, Any]:
        """GitHub API 요청 형식으로 변환"""
        if self.position is not None:
            return {'path': self.path, 'position': self.position, 'body': self.body}
        return {
            'path': self.path,
            'line': self.line,
            'side': self.side.value,
            'body': self.body,
        }


@dataclass
class DroppedComment:
    """앵커링에 실패해서 제외된 코멘트"""
    comment: LineComment
    reason: str


@dataclass
class AnchoringResult:
    """코멘트 앵커링 결과"""
    anchored: List[AnchoredComment] = field(default_factory=list)
    dropped: List[DroppedComment] = field(default_factory=list)

    @property
    def payloads(self) -> List[Dict[str, Any]]:
        return [c.to_payload() for c in self.anchored]
