"""FastAPI web application for depsemver."""

from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from depsemver.compare import compare_versions
from depsemver.errors import VersionParseError
from depsemver.models import DEFAULT_SEED, Snapshot, Version
from depsemver.walker import HistoryWalker

app = FastAPI(
    title="depsemver",
    description="Infer a package version from the history of its dependencies",
    version="0.1.0",
)


class CompareRequest(BaseModel):
    """Request model for comparing two version specifiers."""
    old: str
    new: str


class CompareResponse(BaseModel):
    """Response model for a version comparison."""
    severity: str


class InferRequest(BaseModel):
    """Request model for inferring a version from manifest snapshots."""
    snapshots: list[str]
    seed: Optional[str] = None
    current_version: Optional[str] = None


class StepModel(BaseModel):
    commit: str
    severity: str
    groups: dict[str, str]
    version: str


class InferResponse(BaseModel):
    """Response model for an inferred version."""
    version: str
    updated: bool
    stale: bool
    steps: list[StepModel]
    skipped: list[str]


@app.get("/api/health")
async def health():
    """Liveness check."""
    return {"status": "ok"}


@app.post("/api/compare", response_model=CompareResponse)
async def compare(request: CompareRequest):
    """Compare two dependency version specifiers."""
    return CompareResponse(severity=compare_versions(request.old, request.new).label)


@app.post("/api/infer", response_model=InferResponse)
async def infer(request: InferRequest):
    """Walk manifest snapshots, oldest first, and infer the resulting version."""
    if not request.snapshots:
        raise HTTPException(status_code=400, detail="No snapshots provided")

    try:
        baseline = Version.parse(request.seed) if request.seed else DEFAULT_SEED
    except VersionParseError as e:
        raise HTTPException(status_code=400, detail=f"Invalid seed: {e}")

    walker = HistoryWalker(baseline=baseline)
    result = walker.walk(
        Snapshot(commit=str(index), text=content)
        for index, content in enumerate(request.snapshots)
    )

    data = result.to_dict()
    data["stale"] = result.updated and request.current_version != data["version"]
    return InferResponse(**data)
