"""
Configuration Management

시스템 설정 관리
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from pathlib import Path
import logging
from logging.handlers import RotatingFileHandler

from .diff.errors import InvalidGlobPattern
from .diff.filter import PathFilter, parse_pattern_list
from .review.context import DEFAULT_MARGIN, SKIP_MARKER


@dataclass
class FilterConfig:
    """파일 제외 패턴 설정"""
    exclude_patterns: List[str] = field(default_factory=list)


@dataclass
class ContextConfig:
    """컨텍스트 윈도우 설정"""
    margin: int = DEFAULT_MARGIN
    skip_marker: str = SKIP_MARKER


@dataclass
class ReviewConfig:
    """코멘트 앵커링 설정"""
    anchor_mode: str = "position"
    default_side: str = "RIGHT"
    max_comments_per_file: int = 10


@dataclass
class GitHubConfig:
    """GitHub API 설정"""
    token: Optional[str] = None
    api_base_url: str = "https://api.github.com"
    timeout_seconds: int = 30


@dataclass
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class AppConfig:
    """전체 애플리케이션 설정"""
    filter: FilterConfig = field(default_factory=FilterConfig)
    context: ContextConfig = field(default_factory=ContextConfig)
    review: ReviewConfig = field(default_factory=ReviewConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    debug: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        # GitHub Actions exposes action inputs as INPUT_<NAME>
        raw_patterns = os.getenv("EXCLUDE_PATTERNS", os.getenv("INPUT_EXCLUDE_PATTERNS", ""))

        return cls(
            filter=FilterConfig(
                exclude_patterns=parse_pattern_list(raw_patterns),
            ),
            context=ContextConfig(
                margin=int(os.getenv("CONTEXT_MARGIN", str(DEFAULT_MARGIN))),
                skip_marker=os.getenv("SKIP_MARKER", SKIP_MARKER),
            ),
            review=ReviewConfig(
                anchor_mode=os.getenv("ANCHOR_MODE", "position"),
                default_side=os.getenv("COMMENT_SIDE", "RIGHT"),
                max_comments_per_file=int(os.getenv("MAX_COMMENTS_PER_FILE", "10")),
            ),
            github=GitHubConfig(
                token=os.getenv("GITHUB_TOKEN"),
                api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
                timeout_seconds=int(os.getenv("GITHUB_TIMEOUT", "30")),
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
                file_path=os.getenv("LOG_FILE"),
                max_file_size=int(os.getenv("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
                backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            ),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """YAML 파일에서 설정 로드"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        filter_data = dict(config_data.get('filter', {}))
        patterns = filter_data.get('exclude_patterns', [])
        if isinstance(patterns, str):
            # 쉼표로 구분된 문자열도 허용
            filter_data['exclude_patterns'] = parse_pattern_list(patterns)

        return cls(
            filter=FilterConfig(**filter_data),
            context=ContextConfig(**config_data.get('context', {})),
            review=ReviewConfig(**config_data.get('review', {})),
            github=GitHubConfig(**config_data.get('github', {})),
            logging=LoggingConfig(**config_data.get('logging', {})),
            debug=config_data.get('debug', False),
        )

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        # 제외 패턴 컴파일 확인
        try:
            PathFilter(self.filter.exclude_patterns)
        except InvalidGlobPattern as e:
            errors.append(str(e))

        if self.context.margin < 0:
            errors.append("Context margin must be non-negative")

        if self.review.anchor_mode not in {'position', 'line'}:
            errors.append(f"Invalid anchor mode: {self.review.anchor_mode}")

        if self.review.default_side not in {'RIGHT', 'LEFT'}:
            errors.append(f"Invalid comment side: {self.review.default_side}")

        if self.review.max_comments_per_file <= 0:
            errors.append("Max comments per file must be positive")

        # 로그 레벨 검증
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'filter': {
                'exclude_patterns': list(self.filter.exclude_patterns),
            },
            'context': {
                'margin': self.context.margin,
                'skip_marker': self.context.skip_marker,
            },
            'review': {
                'anchor_mode': self.review.anchor_mode,
                'default_side': self.review.default_side,
                'max_comments_per_file': self.review.max_comments_per_file,
            },
            'github': {
                'api_base_url': self.github.api_base_url,
                'timeout_seconds': self.github.timeout_seconds,
                # 보안상 토큰은 제외
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
            'debug': self.debug,
        }


def configure_logging(config: LoggingConfig) -> None:
    """로깅 설정"""
    logging.basicConfig(
        level=getattr(logging, config.level.upper()),
        format=config.format,
    )

    # 파일 로깅이 설정된 경우 로테이션 설정
    if config.file_path:
        handler = RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
        )
        handler.setFormatter(logging.Formatter(config.format))
        logging.getLogger().addHandler(handler)
