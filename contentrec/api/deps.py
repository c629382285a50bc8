from fastapi import HTTPException, Request, status

from ..core.config import settings
from ..core.errors import AuthenticationError
from ..services.engine import Engine


def get_engine(request: Request) -> Engine:
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Recommendation engine unavailable")
    return engine


def get_current_user_id(request: Request) -> str:
    """User id as handed over by the identity layer in front of this service."""
    user_id = request.headers.get(settings.USER_ID_HEADER, "").strip()
    if not user_id:
        raise AuthenticationError(f"Missing {settings.USER_ID_HEADER} header")
    return user_id
