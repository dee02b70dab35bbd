"""Notification adapters - Verification email dispatch on FastAPI background tasks."""

from .dispatcher import NotificationDispatcher, build_verification_link

__all__ = ["NotificationDispatcher", "build_verification_link"]
