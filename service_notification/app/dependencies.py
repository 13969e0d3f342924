"""
FastAPI dependencies for handlers that need the wired services.
"""

from typing import Any, Dict

from fastapi import Depends, HTTPException, Request

from .bootstrap import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise HTTPException(status_code=503, detail="Service startup has not completed")
    return container


async def get_current_claims(request: Request,
                             container: ServiceContainer = Depends(get_container)) -> Dict[str, Any]:
    """Claims of the authenticated caller; responds 401 otherwise."""
    return await container.authenticator.authenticate_request(request)


def get_database(container: ServiceContainer = Depends(get_container)) -> Any:
    """The configured MongoDB database for this request."""
    return container.database.get_database()
