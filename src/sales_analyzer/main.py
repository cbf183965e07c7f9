from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from .backends import MockAnalysisBackend
from .config import Settings, get_settings
from .controller import AnalysisRequestController
from .page import INDEX_HTML
from .schemas import AnalyzeRequest, ControllerState, ErrorResponse
from .utils import ExportKind
import logging


def build_controller(settings: Settings) -> AnalysisRequestController:
    backend = MockAnalysisBackend(delay=settings.mock_delay)
    return AnalysisRequestController(backend, timeout=settings.analysis_timeout)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if getattr(app.state, "controller", None) is None:
        app.state.controller = build_controller(get_settings())
    logging.info("Sales call analyzer ready")
    yield
    await app.state.controller.aclose()


def get_controller(request: Request) -> AnalysisRequestController:
    return request.app.state.controller


app = FastAPI(
    title="Sales Call Analyzer API",
    description="Analyze YouTube sales calls for talk-time ratio, questions asked, sentiment and recommendations",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global exception handler for 500 errors
@app.exception_handler(500)
async def internal_server_error_handler(request: Request, exc: Exception):
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred while processing the request. Please try again later."}
    )

@app.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index():
    return HTMLResponse(INDEX_HTML)

@app.post(
    "/analyze",
    response_model=ControllerState,
    responses={
        200: {
            "description": "Analysis started, or finished when `wait` is set",
            "content": {
                "application/json": {
                    "examples": {
                        "loading": {"value": {"status": "loading", "url": "https://www.youtube.com/watch?v=abc123"}},
                        "failed": {"value": {"status": "failed", "error": "Analysis timed out after 30 seconds"}},
                    }
                }
            }
        },
        400: {
            "description": "Bad Request - the URL is not a YouTube video link",
            "model": ErrorResponse,
            "content": {
                "application/json": {
                    "example": {"detail": "Please enter a valid YouTube URL"}
                }
            }
        },
    },
    summary="Analyze Sales Call",
    description="Starts analysis of a YouTube sales call. Any earlier analysis is superseded."
)
async def analyze_video(
    payload: AnalyzeRequest,
    wait: bool = False,
    controller: AnalysisRequestController = Depends(get_controller),
):
    task = controller.submit(payload.url)
    if task is None:
        raise HTTPException(status_code=400, detail=controller.error)
    if wait:
        await task
    return controller.state

@app.get("/analysis", response_model=ControllerState, summary="Current analysis state")
async def get_analysis(controller: AnalysisRequestController = Depends(get_controller)):
    return controller.state

@app.get(
    "/analysis/export/{kind}",
    responses={
        200: {"description": "The exported file", "content": {"application/json": {}, "text/plain": {}}},
        204: {"description": "No analysis result to export"},
        422: {"description": "Unknown export kind", "model": ErrorResponse},
    },
    summary="Download analysis results",
)
async def export_analysis(kind: str, controller: AnalysisRequestController = Depends(get_controller)):
    try:
        export_kind = ExportKind(kind)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown export kind: {kind}")

    export = controller.export(export_kind)
    if export is None:
        return Response(status_code=204)
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )
