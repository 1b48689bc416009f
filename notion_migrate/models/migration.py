"""Migration execution models."""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum
from datetime import datetime
import uuid

from dotenv import load_dotenv

from ..errors import ConfigError
from .record import MigrationResult


DEFAULT_NOTION_VERSION = "2022-06-28"
DEFAULT_BASE_URL = "https://api.notion.com/v1"


class MigrationStatus(str, Enum):
    """Status of a migration run."""
    IDLE = "idle"
    FETCHING_SOURCE = "fetching_source"
    FETCHING_SCHEMA = "fetching_schema"
    MIGRATING = "migrating"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class MigrationRun:
    """A complete migration run and its tallies."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    source_id: str = ""
    target_id: str = ""
    status: MigrationStatus = MigrationStatus.IDLE
    dry_run: bool = False
    batch_size: int = 10

    # Timing
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    # Progress
    records_fetched: int = 0
    batches_total: int = 0
    current_batch: int = 0

    # Statistics
    succeeded: int = 0
    failed: int = 0
    failed_ids: List[str] = field(default_factory=list)
    errors: List[Dict[str, Any]] = field(default_factory=list)
    results: List[MigrationResult] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return self.succeeded + self.failed

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get duration in seconds."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def record_success(self) -> None:
        self.succeeded += 1

    def record_failure(self, record_id: str, error: str) -> None:
        self.failed += 1
        self.failed_ids.append(record_id)
        self.errors.append({
            "record_id": record_id,
            "error": error,
            "timestamp": datetime.utcnow().isoformat(),
        })

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "source_id": self.source_id,
            "target_id": self.target_id,
            "status": self.status.value,
            "dry_run": self.dry_run,
            "batch_size": self.batch_size,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "records_fetched": self.records_fetched,
            "batches_total": self.batches_total,
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "failed_ids": self.failed_ids,
            "errors": self.errors,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass
class MigrationConfig:
    """Configuration for talking to the API and pacing a migration."""
    notion_token: Optional[str] = None
    notion_version: str = DEFAULT_NOTION_VERSION
    base_url: str = DEFAULT_BASE_URL

    # Execution options
    batch_size: int = 10
    pacing_delay: float = 0.1  # Seconds to wait after each page
    page_size: int = 100  # Max allowed by the query endpoint

    # HTTP options
    max_retries: int = 3
    backoff_factor: float = 2.0
    timeout: float = 30.0

    def validate(self) -> List[str]:
        """
        Validate the configuration.

        Returns:
            List of validation error messages
        """
        errors = []

        if not self.notion_token:
            errors.append("NOTION_API_KEY is not set")

        if self.batch_size <= 0:
            errors.append("batch_size must be greater than 0")

        if self.pacing_delay < 0:
            errors.append("pacing_delay cannot be negative")

        if not 0 < self.page_size <= 100:
            errors.append("page_size must be between 1 and 100")

        return errors

    def require_valid(self) -> "MigrationConfig":
        """Raise ConfigError if the configuration is not usable."""
        errors = self.validate()
        if errors:
            raise ConfigError("; ".join(errors))
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation (without the token)."""
        return {
            "notion_version": self.notion_version,
            "base_url": self.base_url,
            "batch_size": self.batch_size,
            "pacing_delay": self.pacing_delay,
            "page_size": self.page_size,
            "max_retries": self.max_retries,
            "backoff_factor": self.backoff_factor,
            "timeout": self.timeout,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MigrationConfig":
        """Create from dictionary representation."""
        return cls(
            notion_token=data.get("notion_token"),
            notion_version=data.get("notion_version", DEFAULT_NOTION_VERSION),
            base_url=data.get("base_url", DEFAULT_BASE_URL),
            batch_size=data.get("batch_size", 10),
            pacing_delay=data.get("pacing_delay", 0.1),
            page_size=data.get("page_size", 100),
            max_retries=data.get("max_retries", 3),
            backoff_factor=data.get("backoff_factor", 2.0),
            timeout=data.get("timeout", 30.0),
        )

    @classmethod
    def from_env(cls, **overrides: Any) -> "MigrationConfig":
        """Load configuration from the environment (and a .env file if present)."""
        load_dotenv()

        data: Dict[str, Any] = {
            "notion_token": os.environ.get("NOTION_API_KEY"),
            "notion_version": os.environ.get("NOTION_VERSION", DEFAULT_NOTION_VERSION),
            "base_url": os.environ.get("NOTION_BASE_URL", DEFAULT_BASE_URL),
        }
        data.update({k: v for k, v in overrides.items() if v is not None})

        return cls.from_dict(data)
