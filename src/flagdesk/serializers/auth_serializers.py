from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from flagdesk.models import User

BAD_CREDENTIALS = "Invalid email or password."


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Email/password login; tokens carry user_id, role and is_staff claims."""

    username_field = "email"

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["user_id"] = user.user_id
        token["role"] = user.role
        token["is_staff"] = user.is_moderation_staff
        return token

    def validate(self, attrs):
        user = (
            User.objects.filter(email=attrs.get("email"), is_active=1, is_deleted=0)
            .first()
        )
        if user is None or not user.check_password(attrs.get("password")):
            raise AuthenticationFailed(BAD_CREDENTIALS)

        refresh = self.get_token(user)
        return {
            "refresh": str(refresh),
            "access": str(refresh.access_token),
            "user_id": user.user_id,
            "role": user.role,
        }
