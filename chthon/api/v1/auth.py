from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session
from chthon.db.session import get_session
from chthon.schemas.auth import (
    CheckEmailOut,
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    SignupRequest,
    TokenResponse,
)
from chthon.schemas.user import UserOut
from chthon.services.auth_service import (
    authenticate_user,
    create_access_token,
    create_refresh_token,
    create_user,
    get_user_by_email,
    revoke_refresh_token,
    store_refresh_token,
    validate_refresh_token,
)
from chthon.services.user_service import to_user_out

router = APIRouter(prefix='/auth', tags=['auth'])


def _issue_tokens(session: Session, user_id: str) -> TokenResponse:
    access_token = create_access_token(user_id)
    refresh_token, expires_at = create_refresh_token(user_id)
    store_refresh_token(session, refresh_token, user_id, expires_at)
    return TokenResponse(access_token=access_token, refresh_token=refresh_token)


@router.post('/signup', response_model=UserOut, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, session: Session = Depends(get_session)) -> UserOut:
    existing = get_user_by_email(session, payload.email)
    if existing:
        if existing.hashed_password:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Email already registered')
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='This email is already registered with an external provider. Please sign in with it instead.',
        )
    user = create_user(session, payload.email, payload.password, payload.name)
    return to_user_out(user)


@router.get('/check-email', response_model=CheckEmailOut)
def check_email(
    email: str = Query(..., min_length=1),
    session: Session = Depends(get_session),
) -> CheckEmailOut:
    user = get_user_by_email(session, email)
    if not user:
        return CheckEmailOut(exists=False)
    return CheckEmailOut(exists=True, provider='email' if user.hashed_password else 'external')


@router.post('/login', response_model=TokenResponse)
def login(payload: LoginRequest, session: Session = Depends(get_session)) -> TokenResponse:
    user = authenticate_user(session, payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid email or password')
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='User is inactive')
    return _issue_tokens(session, user.id)


@router.post('/refresh', response_model=TokenResponse)
def refresh(payload: RefreshRequest, session: Session = Depends(get_session)) -> TokenResponse:
    user_id = validate_refresh_token(session, payload.refresh_token)
    revoke_refresh_token(session, payload.refresh_token)
    return _issue_tokens(session, user_id)


@router.post('/logout')
def logout(payload: LogoutRequest, session: Session = Depends(get_session)) -> dict:
    revoke_refresh_token(session, payload.refresh_token)
    return {'status': 'ok'}
