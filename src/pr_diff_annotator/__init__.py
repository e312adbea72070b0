"""
PR Diff Annotator

Pull Request diff 파싱, 위치 계산 및 컨텍스트 추출 엔진
"""

__version__ = "1.0.0"

from .api import DiffAnnotationAPI

__all__ = ["DiffAnnotationAPI"]
