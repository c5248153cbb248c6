import logging

from fastapi import APIRouter, HTTPException, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool
from pydantic import EmailStr, Field

from app.models.user import User
from app.utils.base import CamelModel, TokenPurpose
from app.utils.config import settings
from app.services.auth import (
    TokenError,
    consume_one_time_token,
    create_session_token,
    decode_session_token,
    find_user_by_one_time_token,
    hash_password,
    issue_one_time_token,
    verify_password,
)
from app.services.auth.dependencies import get_current_user, get_session_token
from app.services.mail import reset_password_email, send_email, verification_email
from app.services.rate_limit import throttle_client, throttle_user
from app.services.users import DuplicateEmailError, UserStore, get_user_store


logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_token_expires_minutes * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
    )


def _session_payload(user: User, token: str) -> dict:
    return {**user.to_output(), "token": token}


class RegisterBody(CamelModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)

@router.post("/register", status_code=201)
def register(body: RegisterBody, response: Response, store: UserStore = Depends(get_user_store)) -> dict:
    email = body.email.lower()
    # Early check gives a clean message; the unique index still guards races
    if store.get_by_email(email):
        raise HTTPException(status_code=409, detail="User already exists")
    try:
        user = store.create(name=body.name.strip(), email=email, password=hash_password(body.password))
    except DuplicateEmailError:
        raise HTTPException(status_code=409, detail="User already exists")

    token = create_session_token(str(user.id))
    _set_session_cookie(response, token)
    logger.info("Registered user %s", user.id)
    return _session_payload(user, token)


class LoginBody(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)

@router.post("/login")
def login(body: LoginBody, response: Response, store: UserStore = Depends(get_user_store)) -> dict:
    user = store.get_by_email(body.email)
    if not user:
        raise HTTPException(status_code=404, detail="User not found, sign up!")
    if not verify_password(body.password, user.password):
        logger.info("Failed login for user %s", user.id)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_session_token(str(user.id))
    _set_session_cookie(response, token)
    return _session_payload(user, token)


@router.get("/logout")
def logout(response: Response) -> dict:
    # Session tokens are stateless; dropping the cookie is the whole logout
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
    )
    return {"message": "User logged out"}


@router.get("/user")
def get_user(current_user: User = Depends(get_current_user)) -> dict:
    return current_user.to_output()


class UpdateUserBody(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    bio: str | None = None
    photo: str | None = None

@router.patch("/user")
def update_user(
    body: UpdateUserBody,
    current_user: User = Depends(get_current_user),
    store: UserStore = Depends(get_user_store),
) -> dict:
    """PROTECTED: Update profile fields. Email and role cannot change here."""
    for field, value in body.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(current_user, field, value)
    store.save(current_user)
    return current_user.to_output()


@router.get("/login-status")
def login_status(
    token: str | None = Depends(get_session_token),
    store: UserStore = Depends(get_user_store),
) -> bool:
    """True only when the session would pass the auth dependency."""
    if not token:
        return False
    try:
        user_id = decode_session_token(token)
    except TokenError:
        return False
    return store.get(user_id) is not None


@router.post("/verify-email")
async def verify_email(request: Request, current_user: User = Depends(get_current_user)) -> dict:
    """PROTECTED | RATE-LIMITED: Email the current user a verification link."""
    if current_user.is_verified:
        raise HTTPException(status_code=400, detail="User is already verified")
    await run_in_threadpool(throttle_user, request, current_user, settings.email_rate_limit_seconds)

    token = await run_in_threadpool(issue_one_time_token, current_user, TokenPurpose.VERIFICATION)
    subject, text = verification_email(current_user.name, token)
    await send_email(current_user.email, subject, text)
    return {"message": "Email sent"}


@router.post("/verify-user/{verification_token}")
def verify_user(verification_token: str, store: UserStore = Depends(get_user_store)) -> dict:
    user = find_user_by_one_time_token(store, TokenPurpose.VERIFICATION, verification_token)
    if not user:
        raise HTTPException(status_code=400, detail="Invalid or expired verification token")
    if user.is_verified:
        raise HTTPException(status_code=400, detail="User is already verified")
    try:
        consume_one_time_token(user, TokenPurpose.VERIFICATION, verification_token)
    except TokenError:
        raise HTTPException(status_code=400, detail="Invalid or expired verification token")

    user.is_verified = True
    store.save(user)
    logger.info("Verified user %s", user.id)
    return {"message": "User verified"}


class ForgotPasswordBody(CamelModel):
    email: EmailStr

@router.post("/forgot-password")
async def forgot_password(
    request: Request,
    body: ForgotPasswordBody,
    store: UserStore = Depends(get_user_store),
) -> dict:
    """RATE-LIMITED: Email a password reset link."""
    # Throttled before the lookup so unknown emails count against the window too
    await run_in_threadpool(throttle_client, request, settings.email_rate_limit_seconds)
    user = await run_in_threadpool(store.get_by_email, body.email)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    token = await run_in_threadpool(issue_one_time_token, user, TokenPurpose.PASSWORD_RESET)
    subject, text = reset_password_email(user.name, token)
    await send_email(user.email, subject, text)
    return {"message": "Email sent"}


class ResetPasswordBody(CamelModel):
    password: str = Field(min_length=1)

@router.post("/reset-password/{reset_password_token}")
def reset_password(
    reset_password_token: str,
    body: ResetPasswordBody,
    store: UserStore = Depends(get_user_store),
) -> dict:
    user = find_user_by_one_time_token(store, TokenPurpose.PASSWORD_RESET, reset_password_token)
    if not user:
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")
    try:
        consume_one_time_token(user, TokenPurpose.PASSWORD_RESET, reset_password_token)
    except TokenError:
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")

    user.password = hash_password(body.password)
    store.save(user)
    logger.info("Password reset for user %s", user.id)
    return {"message": "Password reset successfully"}


class ChangePasswordBody(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=1)

@router.patch("/change-password")
def change_password(
    body: ChangePasswordBody,
    current_user: User = Depends(get_current_user),
    store: UserStore = Depends(get_user_store),
) -> dict:
    if not verify_password(body.current_password, current_user.password):
        raise HTTPException(status_code=400, detail="Invalid password!")

    current_user.password = hash_password(body.new_password)
    store.save(current_user)
    return {"message": "Password changed successfully"}
