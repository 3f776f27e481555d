from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


class StartCronRequest(BaseModel):
    schedule: Optional[str] = Field(None, description="5-field cron expression")
    url: Optional[str] = Field(None, description="Absolute URL to call on each tick")
    method: Optional[str] = Field(None, description="HTTP method, defaults to GET")
    timeout: Optional[int] = Field(None, description="Per-request timeout in milliseconds")
    overlap_policy: Optional[Literal["allow", "skip"]] = None


class UpdateScheduleRequest(BaseModel):
    schedule: Optional[str] = None

    @field_validator("schedule")
    @classmethod
    def strip_value(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v else v


class UpdateUrlRequest(BaseModel):
    url: Optional[str] = None

    @field_validator("url")
    @classmethod
    def strip_value(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v else v


class CronStats(BaseModel):
    enabled: bool
    running: bool
    schedule: Optional[str] = None
    url: Optional[str] = None
    method: str
    timeout_ms: int
    overlap_policy: str
    total_runs: int
    success_count: int
    failure_count: int
    skipped_count: int
    success_rate: str
    last_run_time: Optional[datetime] = None
    last_run_status: Optional[Literal["success", "failure"]] = None
    last_run_duration_ms: Optional[int] = None
    last_status_code: Optional[int] = None
    last_error: Optional[str] = None
    next_run_time: str
    started_at: Optional[datetime] = None


class CronStatusResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    stats: CronStats


class KeepAliveCronSummary(BaseModel):
    enabled: bool
    total_runs: int
    last_run_status: Optional[str] = None


class KeepAliveResponse(BaseModel):
    status: str = "alive"
    timestamp: datetime
    uptime_seconds: float
    cron: KeepAliveCronSummary
