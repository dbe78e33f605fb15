"""Pydantic models for normalized records and API request/response schemas."""
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator


class ApiFamily(str, Enum):
    """Booru API family sharing one response layout."""
    MOEBOORU = "moebooru"
    DANBOORU = "danbooru"
    GELBOORU = "gelbooru"
    GELBOORU_NSFW = "gelbooru_nsfw"   # rule34-style, every post is explicit
    E621 = "e621"
    PHILOMENA = "philomena"
    SHIMMIE = "shimmie"               # XML responses
    WALLHAVEN = "wallhaven"
    WAIFU_IM = "waifu_im"
    NEKOS_BEST = "nekos_best"
    ZEROCHAN = "zerochan"
    SANKAKU = "sankaku"


class ScoreMethod(str, Enum):
    """Which composite similarity score to use."""
    GENERAL = "general"         # comparable labels, favours whole-string similarity
    TEXT_MATCH = "text_match"   # search-as-you-type, favours substring hits


# ============================================================================
# Normalized records
# ============================================================================

class PostRecord(BaseModel):
    """One post, normalized across all API families."""
    id: int | str
    width: int = 0
    height: int = 0
    aspect_ratio: float = 1
    tags: str = Field(default="", description="Space separated tag names")
    rating: str = Field(default="s", description="s (safe), q (questionable) or e (explicit)")
    is_nsfw: bool = False
    md5: str = ""
    preview_url: str
    sample_url: str
    file_url: str
    file_url_fallbacks: Optional[list[str]] = Field(
        default=None,
        description="Alternative full-size URLs to try when the extension is a guess"
    )
    file_ext: str = "jpg"
    file_size: Optional[int] = None
    source: str


class TagRecord(BaseModel):
    """A tag with its post count (0 when the provider does not report one)."""
    name: str
    count: int = 0


# ============================================================================
# Similarity
# ============================================================================

class CompareRequest(BaseModel):
    """Request model for comparing two strings."""
    a: str = Field(..., description="First string")
    b: str = Field(..., description="Second string")


class CompareResponse(BaseModel):
    """All similarity signals for a pair of strings."""
    distance: int = Field(description="Levenshtein edit distance")
    partial_ratio: float = Field(description="Best match of the shorter string against windows of the longer")
    score: float = Field(description="General composite score in [0, 1]")
    text_match_score: float = Field(description="Text-match composite score in [0, 1]")


class ScoreRequest(BaseModel):
    """Request model for scoring two strings."""
    a: str
    b: str
    method: ScoreMethod = ScoreMethod.GENERAL


class ScoreResponse(BaseModel):
    """Composite score for a pair of strings."""
    score: float
    method: ScoreMethod


class RankRequest(BaseModel):
    """Request model for ranking candidate strings against a query."""
    query: str = Field(..., description="User query")
    candidates: list[str] = Field(..., description="Candidate tag or title strings")
    method: ScoreMethod = Field(
        default=ScoreMethod.TEXT_MATCH,
        description="Scoring method: 'general' or 'text_match'"
    )
    limit: Optional[int] = Field(default=None, ge=1, description="Maximum number of results")
    min_score: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Drop results scoring below this")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "query": "cat",
                    "candidates": ["category", "dog", "cat_ears"],
                    "method": "text_match",
                    "limit": 10,
                }
            ]
        }
    }


class RankedCandidate(BaseModel):
    """A candidate with its score and position in the request."""
    candidate: str
    index: int
    score: float


class RankResponse(BaseModel):
    """Ranked candidates, best first."""
    query: str
    method: ScoreMethod
    results: list[RankedCandidate] = Field(default_factory=list)


class TagSuggestRequest(BaseModel):
    """Request model for tag autocomplete suggestions."""
    query: str
    tags: list[TagRecord]
    limit: Optional[int] = Field(default=None, ge=1)
    min_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    highlight: bool = Field(default=False, description="Return HTML labels with the match in bold")

    @field_validator('query', mode='before')
    @classmethod
    def strip_query(cls, v):
        """Tag queries never carry meaningful surrounding whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v


class RankedTag(BaseModel):
    """A tag suggestion with its score."""
    name: str
    count: int = 0
    score: float
    label: Optional[str] = Field(default=None, description="Escaped HTML label, set when highlighting")


class TagSuggestResponse(BaseModel):
    """Tag suggestions, best first."""
    query: str
    suggestions: list[RankedTag] = Field(default_factory=list)


# ============================================================================
# Normalization
# ============================================================================

class NormalizePostsResponse(BaseModel):
    """Posts normalized from a raw provider response."""
    family: ApiFamily
    count: int
    posts: list[PostRecord] = Field(default_factory=list)


class NormalizeTagsResponse(BaseModel):
    """Tags normalized from a raw provider response."""
    family: ApiFamily
    count: int
    tags: list[TagRecord] = Field(default_factory=list)


class ProvidersResponse(BaseModel):
    """Known providers and the API family each one uses."""
    providers: dict[str, ApiFamily]
    families: list[ApiFamily]


# ============================================================================
# Downloads
# ============================================================================

class DownloadCommandRequest(BaseModel):
    """Request model for building a download shell command."""
    url: str = Field(..., min_length=1)
    directory: str = Field(..., min_length=1)
    file_name: str = Field(..., min_length=1)
    user_agent: Optional[str] = Field(default=None, description="Defaults to the configured user agent")


class DownloadCommandResponse(BaseModel):
    """Shell command ready to be run with bash -c."""
    command: list[str]
    file_url: str = Field(..., description="file:// URL of the downloaded file")


# ============================================================================
# Settings state
# ============================================================================

class StateRestoreRequest(BaseModel):
    """A saved settings snapshot to apply onto the current settings tree."""
    current: dict[str, Any]
    snapshot: dict[str, Any]


class StateRestoreResponse(BaseModel):
    """Settings tree after the snapshot was applied."""
    state: dict[str, Any]
