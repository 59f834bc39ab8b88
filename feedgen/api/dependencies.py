"""
Dependency injection for FastAPI endpoints.
"""
from fastapi import HTTPException, Request, status

from feedgen.data.generator import TradeFeedGenerator


def get_generator(request: Request) -> TradeFeedGenerator:
    """
    Get the generator the app was created for.

    Raises:
        HTTPException: If no generator is attached to the app
    """
    generator = getattr(request.app.state, "generator", None)
    if generator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Trade feed generator is not attached"
        )
    return generator
