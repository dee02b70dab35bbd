"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Request model for user registration."""

    email: EmailStr
    password: str = Field(..., min_length=8, description="User password (min 8 characters)")


class LoginRequest(BaseModel):
    """Request model for login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    """Response model carrying a user-facing confirmation."""

    message: str


class LoginResponse(BaseModel):
    """Response model for successful login."""

    message: str
    token: str
    token_type: str = "bearer"


class VerifyResponse(BaseModel):
    """Response model for token redemption; success is False for expired tokens."""

    success: bool
    message: str


class MeResponse(BaseModel):
    """Identity bound to the presented session token."""

    email: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
