"""FastAPI application entrypoint for visinventory service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import load_config
from ..errors import ConfigError
from ..models import VisualizationRecord
from ..report import legacy_counts_by_app, legacy_total
from ..walker import CorpusWalker, WalkContext


class CollectRequest(BaseModel):
    path: str
    beats_path: Optional[str] = None


class CollectResponse(BaseModel):
    status: str
    total: int
    legacy: int
    by_app: Dict[str, int]


class CheckRequest(BaseModel):
    path: str
    limit: Optional[int] = None


class CheckResponse(BaseModel):
    status: str
    legacy: int
    limit: int
    exceeded: bool


class HealthResponse(BaseModel):
    status: str


def _default_walker(root: Path) -> CorpusWalker:
    return CorpusWalker(WalkContext.from_config(load_config(root)))


def create_app(
    walker_factory: Callable[[Path], CorpusWalker] = _default_walker,
) -> FastAPI:
    """Create the FastAPI application exposing inventory operations."""

    app = FastAPI(title="Visualization Inventory Service", version="1.0.0")

    async def get_walker_factory() -> Callable[[Path], CorpusWalker]:
        return walker_factory

    async def _run_collect(
        factory: Callable[[Path], CorpusWalker], path: str, beats_path: Optional[str]
    ) -> tuple[CorpusWalker, List[VisualizationRecord]]:
        root = Path(path).expanduser()
        if not root.is_dir():
            raise FileNotFoundError(f"Integrations path not found: {path}")

        def _collect() -> tuple[CorpusWalker, List[VisualizationRecord]]:
            # One walker per request so manifest caches never leak between runs.
            walker = factory(root)
            records = walker.collect_integrations(root)
            if beats_path:
                records.extend(walker.collect_beats(beats_path))
            return walker, records

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, _collect)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/collect", response_model=CollectResponse)
    async def collect(
        payload: CollectRequest,
        factory: Callable[[Path], CorpusWalker] = Depends(get_walker_factory),
    ) -> CollectResponse:
        _, records = await _run_collect(factory, payload.path, payload.beats_path)
        return CollectResponse(
            status="ok",
            total=len(records),
            legacy=legacy_total(records),
            by_app=legacy_counts_by_app(records),
        )

    @app.post("/check", response_model=CheckResponse)
    async def check(
        payload: CheckRequest,
        factory: Callable[[Path], CorpusWalker] = Depends(get_walker_factory),
    ) -> CheckResponse:
        walker, records = await _run_collect(factory, payload.path, None)
        limit = payload.limit if payload.limit is not None else walker.config.legacy.limit
        if limit is None:
            raise ConfigError("No legacy limit configured; pass limit or set legacy.limit")
        total = legacy_total(records)
        exceeded = total > limit
        return CheckResponse(
            status="failed" if exceeded else "ok",
            legacy=total,
            limit=limit,
            exceeded=exceeded,
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(
        _: Any, exc: FileNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(
        _: Any, exc: ConfigError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "0.0.0.0", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
