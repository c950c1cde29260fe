"""
Apps package - FastAPI services.

This package contains the service applications:
- auth_service: Browser sign in (OAuth2 + PKCE or shared password) with Redis-backed sessions
"""
