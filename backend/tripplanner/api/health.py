from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

router = APIRouter(tags=["health"])

VERSION = "1.0.0"


def check_database(request: Request) -> Dict[str, Any]:
    """Check database connectivity."""
    try:
        db = request.app.state.session_factory()
        try:
            db.execute(text("SELECT 1")).fetchone()
            return {"status": "healthy", "timestamp": datetime.now().isoformat()}
        finally:
            db.close()
    except SQLAlchemyError as e:
        return {
            "status": "unhealthy",
            "error": str(e),
            "timestamp": datetime.now().isoformat()
        }


@router.get("/healthz")
async def health_check(request: Request):
    """
    Health check including the database.
    Returns 200 if the store answers, 503 otherwise.
    """
    db_check = check_database(request)
    overall_status = db_check["status"]
    
    response = {
        "status": overall_status,
        "timestamp": datetime.now().isoformat(),
        "checks": {"database": db_check},
        "version": VERSION
    }
    
    if overall_status != "healthy":
        return JSONResponse(status_code=503, content=response)
    
    return response


@router.get("/health")
async def simple_health_check():
    """Simple health check for load balancers."""
    return {"status": "ok", "timestamp": datetime.now().isoformat()}
