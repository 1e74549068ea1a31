"""
wfmt Main module - command line and HTTP API entry points
"""

import logging
import time
from typing import Any, Dict, List, Optional

import typer
import uvicorn
from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRouter
from pydantic import BaseModel

from wfmt.features import FeatureRegistry
from wfmt.version import get_version

# Module-level logger
logger = logging.getLogger("wfmt.main")


class ErrorResponse(BaseModel):
    """Standard error response model"""

    detail: str


# Create CLI app with Typer
app = typer.Typer(
    name="wfmt",
    help="wfmt - printf-style formatting with display-width-aware padding",
    add_completion=False,
)

# Create FastAPI app for API server
api_app = FastAPI(
    title="wfmt API",
    description="API for width-aware printf-style formatting",
    version=get_version(),
)

# Add CORS middleware
api_app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API router for versioned endpoints
api_router = APIRouter(prefix="/api/v1")


# Request models
class FormatRequest(BaseModel):
    template: str
    args: List[str] = []


class WidthRequest(BaseModel):
    text: str


# Response models
class FormatResponse(BaseModel):
    output: str


class WidthResponse(BaseModel):
    width: int
    unicode_version: str


# ----------------- Helper Functions -----------------


class ElapsedMsFormatter(logging.Formatter):
    """Formatter that shows milliseconds since program start, right-aligned for up to 9999 seconds."""

    def __init__(self, fmt=None, datefmt=None, *args, **kwargs):
        super().__init__(fmt, datefmt, *args, **kwargs)
        self.start_time = time.monotonic()
        self.width = 8

    def format(self, record):
        elapsed_ms = int((time.monotonic() - self.start_time) * 1000)
        if elapsed_ms < 10**7:
            elapsed = f"[{elapsed_ms:>{self.width}}ms]"
        else:
            elapsed = f"[{elapsed_ms}ms]"
        record.elapsed = elapsed
        return super().format(record)


VERBOSE_LEVEL = 15  # Between INFO (20) and DEBUG (10)
logging.addLevelName(VERBOSE_LEVEL, "VERBOSE")


def verbose(self, message, *args, **kwargs):
    if self.isEnabledFor(VERBOSE_LEVEL):
        self._log(VERBOSE_LEVEL, message, args, **kwargs)


logging.Logger.verbose = verbose  # type: ignore[attr-defined]


def setup_logging(debug: bool = False, verbose: bool = False) -> None:
    """Set up logging configuration"""
    if debug:
        log_level = logging.DEBUG
    elif verbose:
        log_level = VERBOSE_LEVEL
    else:
        log_level = logging.INFO
    formatter = ElapsedMsFormatter("%(elapsed)s %(message)s")
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root = logging.getLogger()
    root.handlers = []  # Remove any existing handlers
    root.addHandler(handler)
    root.setLevel(log_level)

    # uvicorn access lines are noise unless debugging
    logging.getLogger("uvicorn.access").setLevel(
        logging.DEBUG if debug else logging.WARNING
    )


def handle_cli_feature(feature_name: str, **kwargs: Any) -> Optional[Dict[str, Any]]:
    """Run a feature for the CLI; exits with status 1 on failure"""
    feature = FeatureRegistry.get_feature(feature_name)
    if not feature:
        logger.error("Unknown feature: %s", feature_name)
        raise typer.Exit(code=1)

    try:
        result = feature.handler(**kwargs)
    except Exception:
        logger.exception("Unexpected error")
        raise typer.Exit(code=1)

    if not result.success:
        logger.error("Operation failed: %s", result.error or "Unknown error")
        raise typer.Exit(code=1)
    return result.data


def run_api_feature(feature_name: str, **kwargs: Any) -> Any:
    """Run a feature for an API endpoint, mapping failures to HTTP errors"""
    try:
        feature = FeatureRegistry.get_feature(feature_name)
        if not feature:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{feature_name} feature not found",
            )
        result = feature.handler(**kwargs)
        if not result.success:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=result.error or "An error occurred",
            )
        return result.data
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Error in %s endpoint: %s", feature_name, str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from e


# ----------------- CLI Commands -----------------


@app.command()
def version() -> None:
    """Show the wfmt version"""
    setup_logging(False)
    data = handle_cli_feature("version")
    logger.info("wfmt version: %s", data.get("version", "unknown"))


@app.command("format")
def format_command(
    template: str = typer.Argument(..., help="Format template, e.g. '%-8s|%5.2f'"),
    args: Optional[List[str]] = typer.Argument(
        None, help="Argument literals; put -- before literals starting with '-'"
    ),
    newline: bool = typer.Option(
        True, "--newline/--no-newline", help="Terminate the output with a newline"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug mode"),
    verbose: bool = typer.Option(
        False, "--verbose", help="Enable verbose logging (between info and debug)"
    ),
) -> None:
    """Format typed argument literals with a printf-style template"""
    setup_logging(debug, verbose)
    data = handle_cli_feature("format", template=template, args=args or [])
    typer.echo(data["output"], nl=newline)


@app.command()
def width(
    text: str = typer.Argument(..., help="Text to measure"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug mode"),
) -> None:
    """Print the display width of a text in terminal columns"""
    setup_logging(debug)
    data = handle_cli_feature("width", text=text)
    logger.verbose("unicode tables %s", data["unicode_version"])  # type: ignore[attr-defined]
    typer.echo(data["width"])


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Host to bind the API server"),
    port: int = typer.Option(8000, help="Port to bind the API server"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug mode"),
):
    """Start the wfmt API server"""
    setup_logging(debug)

    logger.info(f"Starting wfmt API server version {get_version()} on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(api_app, host=host, port=port)


# ----------------- API Endpoints -----------------


@api_router.get("/version")
async def get_version_endpoint():
    """Get wfmt version"""
    return run_api_feature("version")


@api_router.post(
    "/format",
    response_model=FormatResponse,
    responses={400: {"model": ErrorResponse}},
)
async def format_endpoint(request: FormatRequest):
    """Format argument literals with a template"""
    return run_api_feature("format", template=request.template, args=request.args)


@api_router.post("/width", response_model=WidthResponse)
async def width_endpoint(request: WidthRequest):
    """Measure the display width of a text"""
    return run_api_feature("width", text=request.text)


# Include the router in the FastAPI app
api_app.include_router(api_router)


if __name__ == "__main__":
    app()
