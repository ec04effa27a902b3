from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from chthon.db.session import get_session
from chthon.models.user import User
from chthon.schemas.analytics import AnalyticsSummary
from chthon.schemas.user import UserConfigOut, UserOut, UserUpdate
from chthon.services.analytics_service import list_analytics, since_days, summarize_analytics
from chthon.services.auth_service import get_current_user
from chthon.services.user_service import to_user_config_out, to_user_out, update_user

router = APIRouter(prefix='/users', tags=['users'])


@router.get('/me', response_model=UserOut)
def me(user: User = Depends(get_current_user)) -> UserOut:
    return to_user_out(user)


@router.patch('/me', response_model=UserOut)
def update_me(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> UserOut:
    try:
        record = update_user(session, user, payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return to_user_out(record)


@router.get('/me/config', response_model=UserConfigOut)
def my_config(user: User = Depends(get_current_user)) -> UserConfigOut:
    return to_user_config_out(user)


@router.get('/me/usage', response_model=AnalyticsSummary)
def my_usage(
    days: Optional[int] = None,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> AnalyticsSummary:
    records = list_analytics(session, since=since_days(days), user_id=user.id)
    return summarize_analytics(records)
