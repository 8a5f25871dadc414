"""
Health check endpoint.
Verifies the staging directories and the object store configuration.
"""
import os

from fastapi import APIRouter, Depends, HTTPException

from app.storage.r2_client import R2Client, get_r2_client
from app.storage.temp_dirs import TempDirectories, get_temp_directories

router = APIRouter()


@router.get("")
async def health_check(
    temp_dirs: TempDirectories = Depends(get_temp_directories),
    r2: R2Client = Depends(get_r2_client),
):
    """
    Health check endpoint.
    Returns status of the staging directories and the object store.
    """
    health_status = {
        "status": "healthy",
        "staging": "unknown",
        "storage": "unknown"
    }

    # Check staging directories
    unwritable = [
        name for name, path in temp_dirs.category_dirs.items()
        if not (path.is_dir() and os.access(path, os.W_OK))
    ]
    if unwritable:
        health_status["staging"] = f"error: not writable: {', '.join(unwritable)}"
        health_status["status"] = "unhealthy"
    else:
        health_status["staging"] = "ok"

    # Check object store
    if r2.is_configured:
        health_status["storage"] = "configured"
    else:
        health_status["storage"] = "not configured"
        health_status["status"] = "unhealthy"

    if health_status["status"] == "unhealthy":
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
