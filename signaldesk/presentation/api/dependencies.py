"""Dependency injection for FastAPI.

The exit engine is built once in the application lifespan and stored on
``app.state``; routes receive it through ``ExitEngineDep``.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from signaldesk.application.trading import ExitEngine


def get_exit_engine(request: Request) -> ExitEngine:
    """Get the process-wide ExitEngine.

    Raises:
        HTTPException: 503 if the engine is not initialized (startup not
            finished or failed).
    """
    engine = getattr(request.app.state, "exit_engine", None)
    if engine is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"error": "ServiceUnavailable", "message": "Exit engine not initialized"},
        )
    return engine


# ============================================================================
# TYPE ALIASES (for cleaner route signatures)
# ============================================================================

ExitEngineDep = Annotated[ExitEngine, Depends(get_exit_engine)]
