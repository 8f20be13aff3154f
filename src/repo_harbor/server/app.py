"""FastAPI application for the repository service.

Exposes an HTTP API to clone repositories, browse their file trees, read and
overwrite files, and drive simulator builds. Endpoints are plain ``def``
functions so each request runs on its own worker thread; a fresh
``RepositoryStore`` is built per request.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from pathlib import Path
from typing import Literal

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from repo_harbor import __version__
from repo_harbor.lib.command import CommandResult
from repo_harbor.lib.config import Config
from repo_harbor.lib.errors import NotFoundError, RepoHarborError
from repo_harbor.lib.filesystem import resolve_repo_target
from repo_harbor.lib.providers import IOSSimLaunchProvider, XcodeBuildProvider
from repo_harbor.lib.repo import RepositoryStore

logger = logging.getLogger(__name__)

app = FastAPI(
    title="repo_harbor",
    description="Local repository checkouts over HTTP.",
    version=__version__,
)


class CreateRepositoryRequest(BaseModel):
    """Request body for ``POST /repositories``."""

    url: str = ""


class FileNodeResponse(BaseModel):
    """A file or directory in a repository tree."""

    type: Literal["file", "dir"]
    name: str
    size: int
    url: str | None = None
    children: dict[str, FileNodeResponse] | None = None


FileNodeResponse.model_rebuild()


class RepositoryResponse(BaseModel):
    """A repository and its current file tree."""

    id: str
    name: str
    url: str
    files: FileNodeResponse | None = None


def get_config() -> Config:
    return Config.from_env()


def get_store(config: Config = Depends(get_config)) -> RepositoryStore:
    """Build the repository store for one request."""
    return RepositoryStore(
        config.storage_root,
        builder=XcodeBuildProvider(config.build_command),
        launcher=IOSSimLaunchProvider(app_dir=config.app_dir),
    )


# --- Error rendering ---


def _error_response(status: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=int(status),
        content={"error": {"status": int(status), "message": message}},
    )


@app.exception_handler(RepoHarborError)
async def handle_repo_harbor_error(
    request: Request, exc: RepoHarborError
) -> JSONResponse:
    if exc.is_client_error:
        return _error_response(exc.status_code, str(exc))
    logger.error("Error serving %s: %s", request.url, exc)
    return _error_response(exc.status_code, HTTPStatus(exc.status_code).phrase)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = "; ".join(str(err.get("msg", "invalid request")) for err in exc.errors())
    return _error_response(HTTPStatus.BAD_REQUEST, details or "invalid request")


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Error serving %s", request.url)
    status = HTTPStatus.INTERNAL_SERVER_ERROR
    return _error_response(status, status.phrase)


def _command_response(request: Request, result: CommandResult) -> PlainTextResponse:
    if result.success:
        return PlainTextResponse(result.output)
    logger.error(
        "Error serving %s: %s exited with %d",
        request.url,
        result.command[0],
        result.exit_code,
    )
    return PlainTextResponse(
        result.output, status_code=HTTPStatus.INTERNAL_SERVER_ERROR
    )


# --- Pages ---


def _static_file(config: Config, rel_path: str) -> FileResponse:
    if config.static_dir is None:
        raise NotFoundError()
    try:
        target = resolve_repo_target(config.static_dir, rel_path)
    except ValueError as exc:
        raise NotFoundError() from exc
    if not target.is_file():
        raise NotFoundError()
    return FileResponse(target)


@app.get("/", response_class=FileResponse)
def home(config: Config = Depends(get_config)) -> FileResponse:
    return _static_file(config, "index.html")


@app.get("/app", response_class=FileResponse)
def app_page(config: Config = Depends(get_config)) -> FileResponse:
    return _static_file(config, "app.html")


@app.get("/static/{path:path}", response_class=FileResponse)
def static_file(path: str, config: Config = Depends(get_config)) -> FileResponse:
    return _static_file(config, path)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# --- Repositories ---


@app.post(
    "/repositories",
    response_model=RepositoryResponse,
    response_model_exclude_none=True,
)
def create_repository(
    req: CreateRepositoryRequest, store: RepositoryStore = Depends(get_store)
) -> dict:
    """Clone a repository and return it with its file tree."""
    return store.create(req.url).to_dict()


@app.get(
    "/repositories",
    response_model=list[RepositoryResponse],
    response_model_exclude_none=True,
)
def list_repositories(store: RepositoryStore = Depends(get_store)) -> list[dict]:
    """List every repository under the storage root."""
    return [repo.to_dict() for repo in store.list_local()]


@app.get(
    "/repositories/{repository_id}",
    response_model=RepositoryResponse,
    response_model_exclude_none=True,
)
def get_repository(
    repository_id: str, store: RepositoryStore = Depends(get_store)
) -> dict:
    return store.load(repository_id).to_dict()


@app.delete("/repositories/{repository_id}")
def delete_repository(
    repository_id: str, store: RepositoryStore = Depends(get_store)
) -> Response:
    store.delete(repository_id)
    return Response(status_code=HTTPStatus.OK)


@app.post("/repositories/{repository_id}/build", response_class=PlainTextResponse)
def build_repository(
    repository_id: str,
    request: Request,
    store: RepositoryStore = Depends(get_store),
) -> PlainTextResponse:
    """Run the build provider; the body is the build output."""
    return _command_response(request, store.build(repository_id))


@app.get("/repositories/{repository_id}/run", response_class=PlainTextResponse)
def run_repository(
    repository_id: str,
    request: Request,
    store: RepositoryStore = Depends(get_store),
) -> PlainTextResponse:
    """Launch the built app in the simulator; the body is the launcher output."""
    return _command_response(request, store.launch(repository_id))


@app.get("/repositories/{repository_id}/files/{path:path}")
def get_repository_file(
    repository_id: str, path: str, store: RepositoryStore = Depends(get_store)
) -> FileResponse:
    """Stream the raw bytes of a repository file."""
    target: Path = store.open_file(repository_id, path)
    return FileResponse(target)


@app.put("/repositories/{repository_id}/files/{path:path}")
async def put_repository_file(
    repository_id: str,
    path: str,
    request: Request,
    store: RepositoryStore = Depends(get_store),
) -> Response:
    """Overwrite an existing repository file with the raw request body."""
    await run_in_threadpool(store.open_file, repository_id, path)
    data = await request.body()
    await run_in_threadpool(store.write_file, repository_id, path, data)
    return Response(status_code=HTTPStatus.OK)
