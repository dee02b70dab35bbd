"""
API v1 routes.

Defines REST endpoints for registration, login and email verification.
Handlers are plain (sync) functions so FastAPI runs them on its worker
thread pool; domain calls block on bcrypt and the database.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from src.api.dependencies import (
    get_authentication_service,
    get_current_identifier,
    get_registration_service,
)
from src.api.models import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    MeResponse,
    MessageResponse,
    RegisterRequest,
    VerifyResponse,
)
from src.domain.authentication import AuthenticationService
from src.domain.exceptions import (
    AccountNotVerified,
    AlreadyRegistered,
    ConcurrentUpdate,
    CooldownActive,
    InvalidCredentials,
    InvalidToken,
    NotFound,
)
from src.domain.ports import VerifyResult
from src.domain.registration import RegistrationService

router = APIRouter(tags=["v1"])

_RETRY_DETAIL = "Account was modified concurrently, please retry"


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse, "description": "Email already registered"},
        422: {"description": "Validation error"},
    },
    summary="Register a new user",
    description="Submit email and password to create an unverified account. "
    "A verification link will be sent to the provided email.",
)
def register(
    request_data: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> MessageResponse:
    """
    Register a new user and send a verification link.

    - **email**: Valid email address to register
    - **password**: Password (minimum 8 characters)
    """
    try:
        message = service.register(request_data.email, request_data.password)
    except AlreadyRegistered:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        ) from None
    return MessageResponse(message=message)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid email or password"},
        403: {"model": ErrorResponse, "description": "Account not verified"},
        422: {"description": "Validation error"},
    },
    summary="Log in and obtain a session token",
    description="Exchange email and password for a bearer session token. "
    "Unverified accounts are refused and sent a fresh verification link.",
)
def login(
    request_data: LoginRequest,
    background_tasks: BackgroundTasks,
    service: AuthenticationService = Depends(get_authentication_service),
) -> LoginResponse | JSONResponse:
    try:
        result = service.login(request_data.email, request_data.password)
    except InvalidCredentials as e:
        # Same detail for unknown email and wrong password
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
    except AccountNotVerified as e:
        # Must carry the background tasks: the resend email is scheduled on them
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"detail": str(e)},
            background=background_tasks,
        )
    return LoginResponse(message=result.message, token=result.token)


@router.get(
    "/verify",
    response_model=VerifyResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid verification token"},
    },
    summary="Verify account with emailed token",
    description="Redeem the token from the verification link. "
    "Expired tokens return success=false; request a new link instead of retrying.",
)
def verify(
    token: str = Query(..., description="Verification token from the emailed link"),
    service: RegistrationService = Depends(get_registration_service),
) -> VerifyResponse:
    try:
        result = service.verify(token)
    except InvalidToken as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None
    except ConcurrentUpdate:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_RETRY_DETAIL) from None
    return VerifyResponse(
        success=result is VerifyResult.VERIFIED,
        message=service.message_for(result),
    )


@router.post(
    "/resend-verification",
    response_model=MessageResponse,
    responses={
        404: {"model": ErrorResponse, "description": "User not found"},
        429: {"model": ErrorResponse, "description": "Resend cooldown active"},
    },
    summary="Resend verification email",
    description="Issue a new verification link, invalidating the previous one. "
    "Limited to one request per cooldown window.",
)
def resend_verification(
    email: str = Query(..., description="Registered email address"),
    service: RegistrationService = Depends(get_registration_service),
) -> MessageResponse:
    try:
        message = service.resend_verification(email)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from None
    except CooldownActive as e:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=str(e),
            headers={"Retry-After": str(e.remaining_minutes * 60)},
        ) from None
    except ConcurrentUpdate:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_RETRY_DETAIL) from None
    return MessageResponse(message=message)


@router.get(
    "/me",
    response_model=MeResponse,
    responses={401: {"model": ErrorResponse, "description": "Missing or invalid session token"}},
    summary="Current account",
    description="Return the email bound to the bearer session token.",
)
def me(identifier: str = Depends(get_current_identifier)) -> MeResponse:
    return MeResponse(email=identifier)
