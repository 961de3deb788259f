# views.py

from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework_simplejwt.views import TokenObtainPairView

from flagdesk.serializers.auth_serializers import CustomTokenObtainPairSerializer

TOKEN_PAIR_RESPONSE = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        "refresh": openapi.Schema(type=openapi.TYPE_STRING),
        "access": openapi.Schema(type=openapi.TYPE_STRING),
        "user_id": openapi.Schema(type=openapi.TYPE_INTEGER),
        "role": openapi.Schema(type=openapi.TYPE_STRING),
    },
)


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer

    @swagger_auto_schema(
        operation_summary="Log in",
        operation_description=(
            "Exchange email and password for a token pair. The /admin/flags "
            "endpoints additionally require a moderator or admin account."
        ),
        responses={200: TOKEN_PAIR_RESPONSE, 401: "Invalid email or password"},
    )
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)
