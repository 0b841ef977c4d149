from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..pairings.models import CategoryFilter, PairingItem


class ViewMode(str, Enum):
    browse = "browse"
    filtered = "filtered"
    ai_augmented = "ai_augmented"


class AITaskStatus(str, Enum):
    idle = "idle"
    pending = "pending"
    succeeded = "succeeded"
    failed = "failed"


class AIFailure(str, Enum):
    degraded = "degraded"
    credential_missing = "credential_missing"


class ExploreTile(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    blurb: str
    query: str
    category: CategoryFilter = CategoryFilter.all


class BrowseView(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    subtitle: str
    search_placeholder: str
    tiles: tuple[ExploreTile, ...]


class ViewStateSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: ViewMode
    query: str
    category: CategoryFilter
    results: list[PairingItem] = Field(default_factory=list)
    status_message: str | None = None
    ai_status: AITaskStatus = AITaskStatus.idle
    ai_failure: AIFailure | None = None
    ai_consult_available: bool = False
    has_credential: bool = False
    browse: BrowseView | None = None


class QueryRequest(BaseModel):
    query: str = Field(default="", max_length=200)


class CategoryRequest(BaseModel):
    category: CategoryFilter


class ApiKeyRequest(BaseModel):
    api_key: str = Field(default="", max_length=512)


class ApiKeyResponse(BaseModel):
    status: str
    has_credential: bool
