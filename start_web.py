#!/usr/bin/env python3
"""Serve the depsemver JSON API under uvicorn."""

import uvicorn

if __name__ == "__main__":
    print("depsemver JSON API on http://localhost:8000")
    print("  POST /api/compare  {old, new} -> severity")
    print("  POST /api/infer    {snapshots, seed?, current_version?} -> inferred version")
    print("  GET  /api/health")
    print("OpenAPI schema at /docs; Ctrl+C stops the server")

    uvicorn.run(
        "apps.web.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_dirs=["apps", "depsemver"],
    )
