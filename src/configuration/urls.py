"""
URL configuration for flagdesk.

/admin/flags...    flag moderation API (staff only)
/api/auth/         JWT token endpoints
/django-admin/     Django admin site
/swagger/, /redoc/ API documentation
"""

from django.contrib import admin
from django.urls import include, path, re_path
from django.views.generic import RedirectView
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions

api_urlpatterns = [
    path("admin/", include("flagdesk.apis.admin.urls")),
    path("api/auth/", include("flagdesk.apis.auth.urls")),
]

schema_view = get_schema_view(
    openapi.Info(
        title="flagdesk API",
        default_version="v1",
        description="Flag moderation API for forum staff.",
        license=openapi.License(name="BSD License"),
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
    patterns=api_urlpatterns,
)

urlpatterns = [
    *api_urlpatterns,
    path("django-admin/", admin.site.urls),
    re_path(
        r"^swagger(?P<format>\.json|\.yaml)$",
        schema_view.without_ui(cache_timeout=0),
        name="schema-json",
    ),
    path(
        "swagger/",
        schema_view.with_ui("swagger", cache_timeout=0),
        name="schema-swagger-ui",
    ),
    path("redoc/", schema_view.with_ui("redoc", cache_timeout=0), name="schema-redoc"),
    path("", RedirectView.as_view(url="/swagger/", permanent=False)),
]
