from __future__ import annotations

import os

from fastapi import APIRouter, Request

router = APIRouter()

VALID_ENVS = {"prod", "staging", "dev"}


@router.get("/api/version")
async def version(request: Request) -> dict:
    settings = request.app.state.settings
    env = settings.env if settings.env in VALID_ENVS else "dev"
    return {
        "version": settings.app_version,
        "sha": os.getenv("GIT_SHA", "unknown"),
        "built_at": os.getenv("BUILT_AT", "unknown"),
        "env": env,
    }
