"""
Diff Data Models

Unified diff 파싱 결과를 표현하는 불변 데이터 모델들
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


DEV_NULL = "/dev/null"


class ChangeType(Enum):
    """변경 라인 종류"""
    CONTEXT = "context"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class ChangeLine:
    """Hunk 안의 개별 변경 라인"""
    change_type: ChangeType
    content: str
    old_line: Optional[int] = None
    new_line: Optional[int] = None

    def __post_init__(self):
        """데이터 검증"""
        if self.change_type == ChangeType.ADDED:
            if self.new_line is None or self.old_line is not None:
                raise ValueError("Added lines carry a new-file line number only")
        elif self.change_type == ChangeType.REMOVED:
            if self.old_line is None or self.new_line is not None:
                raise ValueError("Removed lines carry an old-file line number only")
        elif self.old_line is None or self.new_line is None:
            raise ValueError("Context lines carry both line numbers")

        for number in (self.old_line, self.new_line):
            if number is not None and number < 1:
                raise ValueError("Line numbers must be positive")

    @classmethod
    def context(cls, content: str, old_line: int, new_line: int) -> "ChangeLine":
        return cls(ChangeType.CONTEXT, content, old_line=old_line, new_line=new_line)

    @classmethod
    def added(cls, content: str, new_line: int) -> "ChangeLine":
        return cls(ChangeType.ADDED, content, new_line=new_line)

    @classmethod
    def removed(cls, content: str, old_line: int) -> "ChangeLine":
        return cls(ChangeType.REMOVED, content, old_line=old_line)

    @property
    def is_added(self) -> bool:
        return self.change_type == ChangeType.ADDED

    @property
    def is_removed(self) -> bool:
        return self.change_type == ChangeType.REMOVED

    @property
    def is_context(self) -> bool:
        return self.change_type == ChangeType.CONTEXT


@dataclass(frozen=True)
class Hunk:
    """`@@ ... @@` 헤더로 구분되는 diff 블록"""
    header: str
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    changes: Tuple[ChangeLine, ...] = ()
    section: str = ""

    def __post_init__(self):
        """데이터 검증"""
        if self.old_start < 0 or self.new_start < 0:
            raise ValueError("Line numbers must be non-negative")
        if self.old_count < 0 or self.new_count < 0:
            raise ValueError("Line counts must be non-negative")

    @property
    def old_line_count(self) -> int:
        """실제 파싱된 old 파일 라인 수 (context + removed)"""
        return sum(1 for c in self.changes if not c.is_added)

    @property
    def new_line_count(self) -> int:
        """실제 파싱된 new 파일 라인 수 (context + added)"""
        return sum(1 for c in self.changes if not c.is_removed)

    @property
    def added_lines(self) -> Tuple[ChangeLine, ...]:
        return tuple(c for c in self.changes if c.is_added)

    @property
    def removed_lines(self) -> Tuple[ChangeLine, ...]:
        return tuple(c for c in self.changes if c.is_removed)


@dataclass(frozen=True)
class DiffFile:
    """파일 단위 변경사항"""
    path: str
    hunks: Tuple[Hunk, ...] = ()
    old_path: Optional[str] = None

    def __post_init__(self):
        """데이터 검증"""
        if not self.path:
            raise ValueError("Destination path cannot be empty")

    @property
    def is_deleted(self) -> bool:
        """삭제된 파일 여부"""
        return self.path == DEV_NULL

    @property
    def is_new(self) -> bool:
        """새로 추가된 파일 여부"""
        return self.old_path == DEV_NULL

    @property
    def additions(self) -> int:
        return sum(len(h.added_lines) for h in self.hunks)

    @property
    def deletions(self) -> int:
        return sum(len(h.removed_lines) for h in self.hunks)


@dataclass(frozen=True)
class ModifiedRange:
    """추가된 라인들의 연속 구간 (new 파일 라인 번호, end 미포함)"""
    start: int
    end: int

    def __post_init__(self):
        """데이터 검증"""
        if self.start < 1:
            raise ValueError("Modified ranges start at line 1 or later")
        if self.end <= self.start:
            raise ValueError("Modified ranges must cover at least one line")

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class ContextWindow:
    """전체 파일 라인 목록에 대한 0-based 구간 (end 미포함)"""
    start: int
    end: int

    def __post_init__(self):
        """데이터 검증"""
        if self.start < 0:
            raise ValueError("Window start must be non-negative")
        if self.end < self.start:
            raise ValueError("Window end cannot precede its start")

    def __len__(self) -> int:
        return self.end - self.start
