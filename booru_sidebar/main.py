"""FastAPI application for booru response normalization and fuzzy tag search."""
import json
import logging
from typing import Optional
from fastapi import FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from contextlib import asynccontextmanager

from .config import get_settings
from .models.schemas import (
    ApiFamily,
    CompareRequest,
    CompareResponse,
    ScoreRequest,
    ScoreResponse,
    RankRequest,
    RankResponse,
    TagSuggestRequest,
    TagSuggestResponse,
    NormalizePostsResponse,
    NormalizeTagsResponse,
    ProvidersResponse,
    DownloadCommandRequest,
    DownloadCommandResponse,
    StateRestoreRequest,
    StateRestoreResponse,
)
from .services.response_normalizer import (
    PROVIDER_FAMILIES,
    family_for_provider,
    get_response_normalizer,
    provider_name,
)
from .services.similarity_service import get_similarity_service
from .utils.file_utils import to_file_url, trim_file_protocol
from .utils.object_utils import apply_to_object, to_plain_object
from .utils.shell_utils import build_download_command

logger = logging.getLogger(__name__)


def decode_json_body(raw_body: bytes) -> object:
    """Decode a raw request body as JSON, tolerating a UTF-8 BOM."""
    body_str = raw_body.decode("utf-8").lstrip("\ufeff")
    return json.loads(body_str)


def parse_family(family: str) -> ApiFamily:
    """Resolve a path parameter to an API family (family value, provider name or site host)."""
    try:
        return ApiFamily(family)
    except ValueError:
        pass
    try:
        return family_for_provider(family)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown API family or provider: {family}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(
        f"Candidate length cap: {settings.max_candidate_length}, "
        f"max candidates: {settings.max_candidates}"
    )
    yield
    logger.info("Shutting down...")


# Create FastAPI app
settings = get_settings()
logging.basicConfig(level=settings.log_level.upper())

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""API for the booru sidebar scripting layer.

## Features

- **Fuzzy matching**: Levenshtein distance, partial ratio and two composite scores
- **Ranking**: Rank tags and titles against a search query
- **Normalization**: Map responses of 12 booru API families to one post/tag shape
- **Downloads**: Build escaped curl commands for saving posts
    """,
    lifespan=lifespan,
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Gzip compression for responses >= 500 bytes (normalized post lists get large)
app.add_middleware(GZipMiddleware, minimum_size=500)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": settings.app_version}


@app.get(
    "/providers",
    response_model=ProvidersResponse,
    summary="Known providers",
    tags=["Normalization"],
)
async def list_providers():
    """List known providers and the API family each one uses."""
    return ProvidersResponse(providers=PROVIDER_FAMILIES, families=list(ApiFamily))


# ============================================================================
# Similarity
# ============================================================================

@app.post(
    "/similarity/compare",
    response_model=CompareResponse,
    summary="Compare two strings",
    tags=["Similarity"],
)
async def compare_strings(req: CompareRequest):
    """Return edit distance, partial ratio and both composite scores."""
    try:
        comparison = await run_in_threadpool(get_similarity_service().compare, req.a, req.b)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CompareResponse(
        distance=comparison.distance,
        partial_ratio=comparison.partial_ratio,
        score=comparison.score,
        text_match_score=comparison.text_match_score,
    )


@app.post(
    "/similarity/score",
    response_model=ScoreResponse,
    summary="Score two strings",
    tags=["Similarity"],
)
async def score_strings(req: ScoreRequest):
    """
    Composite similarity in [0, 1].

    - `general`: for two comparable labels (near-duplicate detection)
    - `text_match`: for a query against a longer tag or title
    """
    try:
        score = await run_in_threadpool(get_similarity_service().score, req.a, req.b, req.method)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ScoreResponse(score=score, method=req.method)


@app.post(
    "/similarity/rank",
    response_model=RankResponse,
    summary="Rank candidates against a query",
    tags=["Similarity"],
)
async def rank_candidates(req: RankRequest):
    """Rank candidate strings by descending score; ties keep request order."""
    try:
        results = await run_in_threadpool(
            get_similarity_service().rank,
            req.query,
            req.candidates,
            method=req.method,
            limit=req.limit or settings.default_rank_limit,
            min_score=req.min_score,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return RankResponse(query=req.query, method=req.method, results=results)


@app.post(
    "/tags/suggest",
    response_model=TagSuggestResponse,
    summary="Tag autocomplete",
    tags=["Similarity"],
)
async def suggest_tags(req: TagSuggestRequest):
    """Rank tags for a search-box query; ties go to the more popular tag."""
    try:
        suggestions = await run_in_threadpool(
            get_similarity_service().suggest_tags,
            req.query,
            req.tags,
            limit=req.limit or settings.default_rank_limit,
            min_score=req.min_score,
            highlight=req.highlight,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return TagSuggestResponse(query=req.query, suggestions=suggestions)


# ============================================================================
# Normalization
# ============================================================================

@app.post(
    "/normalize/{family}/posts",
    response_model=NormalizePostsResponse,
    summary="Normalize a post search response",
    tags=["Normalization"],
)
async def normalize_posts(
    family: str,
    request: Request,
    sfw_only: bool = False,
    site_url: Optional[str] = None
):
    """
    Normalize a raw provider post response.

    `family` is an API family (e.g. `danbooru`), a provider name
    (e.g. `yandere`) or a site host (e.g. `yande.re`). The body is the
    provider's JSON response as-is, or XML for the `shimmie` family, whose
    relative preview paths resolve against `site_url`.
    """
    api_family = parse_family(family)
    # e926 is the safe-only mirror of e621
    sfw_only = sfw_only or provider_name(family) == "e926"
    raw_body = await request.body()

    if api_family == ApiFamily.SHIMMIE:
        payload = raw_body.decode("utf-8", errors="replace")
    else:
        try:
            payload = decode_json_body(raw_body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise HTTPException(status_code=400, detail=f"Invalid JSON: {str(e)}")

    posts = get_response_normalizer().normalize_posts(
        api_family, payload, sfw_only=sfw_only, site_url=site_url
    )
    return NormalizePostsResponse(family=api_family, count=len(posts), posts=posts)


@app.post(
    "/normalize/{family}/tags",
    response_model=NormalizeTagsResponse,
    summary="Normalize a tag search response",
    tags=["Normalization"],
)
async def normalize_tags(family: str, request: Request, autocomplete: bool = False):
    """Normalize a raw provider tag response (set `autocomplete` for label/value lists)."""
    api_family = parse_family(family)
    try:
        payload = decode_json_body(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid JSON: {str(e)}")

    tags = get_response_normalizer().normalize_tags(api_family, payload, autocomplete=autocomplete)
    return NormalizeTagsResponse(family=api_family, count=len(tags), tags=tags)


# ============================================================================
# Downloads
# ============================================================================

@app.post(
    "/downloads/command",
    response_model=DownloadCommandResponse,
    summary="Build a download command",
    tags=["Downloads"],
)
async def download_command(req: DownloadCommandRequest):
    """
    Build a `bash -c` command that creates the directory and downloads the file.

    `directory` may be a local path or a file:// URL.
    """
    directory = trim_file_protocol(req.directory)
    command = build_download_command(
        req.url,
        directory,
        req.file_name,
        req.user_agent or settings.default_user_agent,
    )
    return DownloadCommandResponse(
        command=["bash", "-c", command],
        file_url=to_file_url(f"{directory}/{req.file_name}"),
    )


# ============================================================================
# Settings state
# ============================================================================

@app.post(
    "/state/restore",
    response_model=StateRestoreResponse,
    summary="Restore a settings snapshot",
    tags=["State"],
)
async def restore_state(req: StateRestoreRequest):
    """
    Apply a saved settings snapshot onto the current settings tree.

    Only keys present in `current` are written; nested sections are
    replaced as a whole. Framework bookkeeping keys (`objectName`,
    `parent`, ...) are stripped from the returned state.
    """
    state = req.current
    apply_to_object(state, req.snapshot)
    return StateRestoreResponse(state=to_plain_object(state))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
