"""FastAPI dependency utilities."""

from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request, status

from socialhub.application.services import NotificationService, PushService
from socialhub.container import Container

USER_ID_HEADER = "X-User-Id"


def get_container(request: Request) -> Container:
    """Return the container built during application startup."""

    return request.app.state.container


def parse_user_id(raw_user_id: str | None) -> UUID:
    """Parse the caller identity forwarded by the authenticating gateway."""

    if not raw_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing caller identity",
        )
    try:
        return UUID(raw_user_id)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid caller identity",
        ) from exc


def get_current_user_id(
    x_user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
) -> UUID:
    """Return the identity of the caller making the request."""

    return parse_user_id(x_user_id)


def get_notification_service(container: Container = Depends(get_container)) -> NotificationService:
    return container.services.notifications


def get_push_service(container: Container = Depends(get_container)) -> PushService:
    return container.services.push
