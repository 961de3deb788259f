# token_views.py
"""
JWT token refresh and logout.

Kept apart from authentication.py to avoid circular imports with Django settings.
"""

from datetime import timedelta

from django.conf import settings
from django.core.cache import cache
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed, ValidationError
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from flagdeskutils.logging import get_logger

from .models import User

logger = get_logger(__name__)


def refresh_lifetime_seconds() -> int:
    lifetime = settings.SIMPLE_JWT.get("REFRESH_TOKEN_LIFETIME", timedelta(days=7))
    return int(lifetime.total_seconds())


def blacklist_token(token_jti: str, lifetime: int | None = None) -> None:
    cache.set(f"blacklist:{token_jti}", "1", timeout=lifetime or refresh_lifetime_seconds())


def is_token_blacklisted(token_jti: str) -> bool:
    return bool(cache.get(f"blacklist:{token_jti}"))


class EnhancedTokenRefreshView(TokenRefreshView):
    """
    Token refresh with rotation and logout.

    Request body:
        refresh: Refresh token
        logout: Optional boolean; blacklists the refresh token instead of refreshing
    """

    def post(self, request, *args, **kwargs):
        refresh_token = request.data.get("refresh")
        logout = request.data.get("logout", False)

        if not refresh_token:
            raise ValidationError(
                {"detail": "Refresh token is required"}, code="refresh_token_required"
            )

        try:
            refresh = RefreshToken(refresh_token)
        except TokenError as e:
            logger.warning("token_refresh_failed", reason=str(e))
            raise AuthenticationFailed(
                "Invalid refresh token", code="invalid_refresh_token"
            ) from e

        jti = refresh.get("jti")
        if jti and is_token_blacklisted(jti):
            raise AuthenticationFailed("Refresh token has been revoked", code="token_revoked")

        if logout:
            if jti:
                blacklist_token(jti)
            return Response({"detail": "Successfully logged out"}, status=status.HTTP_200_OK)

        try:
            user = User.objects.get(user_id=refresh["user_id"], is_active=1, is_deleted=0)
        except User.DoesNotExist:
            raise AuthenticationFailed("User not found", code="user_not_found") from None

        # Rotation: the presented refresh token can't be used twice.
        if jti:
            blacklist_token(jti)
        new_refresh = RefreshToken.for_user(user)
        new_refresh["user_id"] = user.user_id
        new_refresh["role"] = user.role

        return Response(
            {
                "access": str(AccessToken.for_user(user)),
                "refresh": str(new_refresh),
                "user_id": user.user_id,
            },
            status=status.HTTP_200_OK,
        )
