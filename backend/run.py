#!/usr/bin/env python3
"""
Run script for the Travel Planner backend.
"""

import uvicorn
import os
from tripplanner.core.config import Settings

if __name__ == "__main__":
    # Fails here, before the server binds, when JWT_SECRET_KEY is missing
    settings = Settings()

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", 8000))

    uvicorn.run(
        "tripplanner.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=settings.environment == "development",
        log_level="info",
        access_log=True,
        use_colors=True
    )
