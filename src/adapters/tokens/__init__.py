"""Token adapters - Verification and session token issuing."""

from .jwt_issuer import JwtTokenIssuer

__all__ = ["JwtTokenIssuer"]
