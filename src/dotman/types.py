"""dotman domain types."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class MappingEntry(BaseModel):
    key: str
    relocated_path: str


class LinkStage(str, Enum):
    """Last completed step of a link operation."""

    PENDING = "pending"
    VALIDATED = "validated"
    REGISTERED = "registered"
    RELOCATED = "relocated"
    LINKED = "linked"


class UnlinkStage(str, Enum):
    """Last completed step of an unlink operation."""

    PENDING = "pending"
    VALIDATED = "validated"
    DETACHED = "detached"
    RESTORED = "restored"
    UNREGISTERED = "unregistered"


class LinkResult(BaseModel):
    success: bool
    source: str
    destination: str
    stage: LinkStage
    error_type: str | None = None
    error: str | None = None


class UnlinkResult(BaseModel):
    success: bool
    source: str
    target: str | None = None
    stage: UnlinkStage
    error_type: str | None = None
    error: str | None = None


class PassthroughResult(BaseModel):
    success: bool
    exit_code: int | None = None
    signal: int | None = None
    error: str | None = None
