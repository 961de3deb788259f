# authentication.py
"""
Bearer-token authentication for flagdesk accounts.

Access tokens carry user_id and role claims. A token whose jti sits in the
cache blacklist (see token_views.blacklist_token) is refused, as is any token
belonging to a deactivated or soft-deleted account.
"""

from django.core.cache import cache
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication

from flagdeskutils.logging import get_logger

from .models import User

logger = get_logger(__name__)


def active_users():
    return User.objects.filter(is_active=1, is_deleted=0)


class CustomJWTAuthentication(JWTAuthentication):
    def get_user(self, validated_token):
        user_id = validated_token.get("user_id")
        if not user_id:
            raise AuthenticationFailed("Token carries no user_id claim", code="user_id_missing")

        jti = validated_token.get("jti")
        if jti and cache.get(f"blacklist:{jti}"):
            raise AuthenticationFailed("Token has been revoked", code="token_blacklisted")

        user = active_users().filter(user_id=user_id).first()
        if user is None:
            raise AuthenticationFailed("User not found", code="user_not_found")
        return user

    def authenticate(self, request):
        result = super().authenticate(request)
        if result is None:
            return None

        user, token = result
        request.user_id = user.user_id
        request.role = token.get("role", user.role)
        logger.debug("jwt_authenticated", user_id=user.user_id, role=request.role)
        return user, token
