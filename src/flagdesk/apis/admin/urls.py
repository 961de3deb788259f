from django.urls import path
from rest_framework.urlpatterns import format_suffix_patterns

from flagdesk.apis.admin.flags_api import (
    AgreeFlagAPI,
    DeferFlagAPI,
    DisagreeFlagAPI,
    FlagsIndexAPI,
)

urlpatterns = [
    path("flags", FlagsIndexAPI.as_view(), name="flags_index"),
    path("flags/agree/<int:post_id>", AgreeFlagAPI.as_view(), name="flags_agree"),
    path(
        "flags/disagree/<int:post_id>",
        DisagreeFlagAPI.as_view(),
        name="flags_disagree",
    ),
    path("flags/defer/<int:post_id>", DeferFlagAPI.as_view(), name="flags_defer"),
]

urlpatterns = format_suffix_patterns(urlpatterns, allowed=["json"])
