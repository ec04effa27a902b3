from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session
from chthon.db.session import get_session
from chthon.models.user import User
from chthon.schemas.admin import (
    AdminAnalyticsOut,
    AdminAuthRequest,
    AdminUsersOut,
    UserBulkUpdate,
    UserBulkUpdateOut,
)
from chthon.services.analytics_service import list_analytics, since_days, summarize_analytics, to_record_out
from chthon.services.auth_service import is_admin_key, require_admin
from chthon.services.user_service import apply_tier_update, delete_user, get_user, list_users, to_user_out

router = APIRouter(prefix='/admin', tags=['admin'])


@router.post('/auth')
def admin_auth(payload: AdminAuthRequest) -> dict:
    if not is_admin_key(payload.admin_key):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid admin key')
    return {'success': True}


@router.get('/users', response_model=AdminUsersOut)
def list_users_endpoint(
    limit: Optional[int] = None,
    offset: int = 0,
    session: Session = Depends(get_session),
    _: Optional[User] = Depends(require_admin),
) -> AdminUsersOut:
    users = list_users(session, limit=limit, offset=offset)
    return AdminUsersOut(users=[to_user_out(user) for user in users])


@router.post('/users/update', response_model=UserBulkUpdateOut)
def update_users_endpoint(
    payload: UserBulkUpdate,
    session: Session = Depends(get_session),
    _: Optional[User] = Depends(require_admin),
) -> UserBulkUpdateOut:
    if not payload.user_ids:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='No user IDs provided')
    if payload.updates is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='No updates provided')
    updated = apply_tier_update(session, payload.user_ids, payload.updates)
    return UserBulkUpdateOut(success=True, updated_count=updated)


@router.delete('/users/{user_id}')
def delete_user_endpoint(
    user_id: str,
    session: Session = Depends(get_session),
    admin: Optional[User] = Depends(require_admin),
) -> dict:
    record = get_user(session, user_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='User not found')
    if admin is not None and admin.id == record.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Cannot delete yourself')
    delete_user(session, record)
    return {'success': True}


@router.get('/analytics', response_model=AdminAnalyticsOut)
def analytics_endpoint(
    days: Optional[int] = Query(default=None, ge=1),
    provider: Optional[str] = None,
    user_id: Optional[str] = None,
    limit: int = Query(default=1000, ge=1, le=10000),
    session: Session = Depends(get_session),
    _: Optional[User] = Depends(require_admin),
) -> AdminAnalyticsOut:
    since = since_days(days)
    records = list_analytics(session, since=since, provider=provider, user_id=user_id)
    return AdminAnalyticsOut(
        records=[to_record_out(record) for record in records[:limit]],
        summary=summarize_analytics(records),
    )
