from django.urls import path

from flagdesk.token_views import EnhancedTokenRefreshView
from flagdesk.views import CustomTokenObtainPairView

urlpatterns = [
    path("token/", CustomTokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("token/refresh/", EnhancedTokenRefreshView.as_view(), name="token_refresh"),
]
