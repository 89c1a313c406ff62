"""
FastAPI application for the list scraper.
"""
import asyncio
import logging
from typing import Callable, List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from xlist_scraper import __version__
from xlist_scraper.api.schemas import FieldIssueOut, ScrapeListRequest, public_field_name
from xlist_scraper.config import ScrapeOptions
from xlist_scraper.errors import ErrorKind, ValidationError
from xlist_scraper.models import AggregatedResult, RunStatus
from xlist_scraper.render.jsonout import aggregated_tweet_to_dict
from xlist_scraper.scheduler.read import ListScrapeOrchestrator
from xlist_scraper.settings import ServerSettings

logger = logging.getLogger(__name__)

OrchestratorFactory = Callable[[ScrapeOptions], ListScrapeOrchestrator]


def create_app(
    settings: Optional[ServerSettings] = None,
    *,
    orchestrator_factory: Optional[OrchestratorFactory] = None,
) -> FastAPI:
    """Build the API around an explicit settings object."""
    settings = settings or ServerSettings()
    factory = orchestrator_factory or ListScrapeOrchestrator

    app = FastAPI(
        title="xlist-scraper API",
        description="Scrape tweets from one or more X lists",
        version=__version__,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(ValidationError, _validation_error_handler)

    def require_token(authorization: Optional[str] = Header(default=None)):
        """Bearer guard honouring AUTH_MODE (off | optional | required)."""
        mode = settings.normalized_auth_mode
        if mode == "off":
            return True
        if not settings.auth_token:
            if mode == "optional":
                return True
            logger.error("AUTH_MODE=required but AUTH_TOKEN is not configured; scrape endpoint disabled")
            raise HTTPException(status_code=503, detail="Auth token not configured")

        provided = None
        if authorization and authorization.lower().startswith("bearer "):
            provided = authorization.split(" ", 1)[1].strip()

        if provided is None and mode == "optional":
            return True
        if provided != settings.auth_token:
            raise HTTPException(status_code=401, detail="Unauthorized")
        return True

    @app.get("/health")
    async def health():
        """Liveness probe; never guarded."""
        return {"status": "ok"}

    @app.post("/scrape/list", dependencies=[Depends(require_token)])
    async def scrape_list(body: ScrapeListRequest):
        options = settings.to_scrape_options(
            max_tweets=body.max_tweets,
            timeout_ms=body.timeout_ms,
            partial_ok=body.partial_ok,
        )
        orchestrator = factory(options)
        result = await asyncio.to_thread(orchestrator.run, body.list_urls)
        return result_response(result)

    return app


def result_response(result: AggregatedResult) -> JSONResponse:
    """Map an aggregate to the HTTP status contract."""
    items = [aggregated_tweet_to_dict(item) for item in result.items]
    details = list(result.errors)

    if result.status is RunStatus.SUCCESS:
        return JSONResponse(status_code=200, content={"ok": True, "count": len(items), "items": items})

    if result.status is RunStatus.PARTIAL:
        return _error_response(
            422,
            "PARTIAL_RESULTS",
            "Some lists failed; returning partial results",
            items=items,
            details=details,
        )

    kind = result.uniform_error_kind
    if kind is ErrorKind.RATE_LIMITED:
        return _error_response(429, "RATE_LIMIT", "Rate limited by X; try again later", details=details)
    if kind is ErrorKind.LOGIN_REQUIRED:
        return _error_response(401, "LOGIN_REQUIRED", "Lists require a signed-in session", details=details)
    return _error_response(500, "INTERNAL", "All scraping attempts failed", details=details)


def _error_response(
    status_code: int,
    code: str,
    message: str,
    *,
    items: Optional[List[dict]] = None,
    details: Optional[list] = None,
) -> JSONResponse:
    content = {"ok": False, "error": code, "message": message}
    if items is not None:
        content["items"] = items
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        FieldIssueOut(field=public_field_name(tuple(error.get("loc", ()))), constraint=error.get("msg", "")).model_dump()
        for error in exc.errors()
    ]
    return _error_response(400, "VALIDATION_ERROR", "Invalid request body", details=details)


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    details = [FieldIssueOut(field=issue.field, constraint=issue.constraint).model_dump() for issue in exc.details]
    return _error_response(400, "VALIDATION_ERROR", str(exc), details=details)


def serve(settings: Optional[ServerSettings] = None) -> None:
    """Run the API under uvicorn."""
    import uvicorn

    settings = settings or ServerSettings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
