from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from streamhub.database import get_async_session
from streamhub.deps.auth import get_current_user
from streamhub.errors import PermissionDeniedError, ValidationError
from streamhub.models.user_model import User, UserRole
from streamhub.services import analytics as analytics_service

router = APIRouter(prefix="/analytics", tags=["analytics"])

# which caller roles may read which scope
ALLOWED_SCOPES = {
    UserRole.ADMIN.value: {UserRole.ADMIN.value, UserRole.CREATOR.value, UserRole.USER.value},
    UserRole.CREATOR.value: {UserRole.CREATOR.value, UserRole.USER.value},
    UserRole.USER.value: {UserRole.USER.value},
}


def _resolve_scope(caller: User, user_role: str | None, user_id: int | None) -> tuple[str, int]:
    role = (user_role or UserRole.USER.value).upper()
    if role not in ALLOWED_SCOPES:
        raise ValidationError(f"Invalid userRole: {user_role}")
    if role not in ALLOWED_SCOPES.get(caller.role, set()):
        raise PermissionDeniedError(f"{role.title()} analytics require {role} access")

    target = user_id if user_id is not None else caller.id
    if target != caller.id and caller.role != UserRole.ADMIN.value:
        raise PermissionDeniedError("Cannot read another user's analytics")
    return role, target


@router.get("")
async def get_analytics(
    time_range: str = Query(analytics_service.DEFAULT_TIME_RANGE, alias="timeRange"),
    user_role: str | None = Query(None, alias="userRole"),
    user_id: int | None = Query(None, alias="userId"),
    caller: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    role, target = _resolve_scope(caller, user_role, user_id)
    return await analytics_service.build(session, role, target, time_range)


@router.get("/export")
async def export_analytics(
    time_range: str = Query(analytics_service.DEFAULT_TIME_RANGE, alias="timeRange"),
    user_role: str | None = Query(None, alias="userRole"),
    user_id: int | None = Query(None, alias="userId"),
    export_format: str = Query("csv", alias="format"),
    caller: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
):
    if export_format != "csv":
        raise ValidationError("Only csv export is supported")

    role, target = _resolve_scope(caller, user_role, user_id)
    data = await analytics_service.build(session, role, target, time_range)
    filename = analytics_service.export_filename(role, time_range)
    return Response(
        content=analytics_service.to_csv(data),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
