from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from flagdesk.permissions import IsModerationStaff
from flagdesk.serializers.flag_serializers import (
    AgreeFlagSerializer,
    FlaggedPostSerializer,
    FlagUserSerializer,
    ReviewableSerializer,
)
from flagdesk.services.flag_query import FlagQuery
from flagdesk.services.moderation_engine import ModerationEngine

error_schema = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        "errors": openapi.Schema(
            type=openapi.TYPE_ARRAY, items=openapi.Schema(type=openapi.TYPE_STRING)
        )
    },
)

resolution_schema = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        "success": openapi.Schema(type=openapi.TYPE_STRING, example="OK"),
        "reviewable": openapi.Schema(type=openapi.TYPE_OBJECT),
    },
)


class FlagsIndexAPI(APIView):
    """
    List flagged posts and the users involved.
    """

    permission_classes = [IsModerationStaff]

    @swagger_auto_schema(
        operation_description="List flagged posts with their flaggers and authors.",
        manual_parameters=[
            openapi.Parameter(
                "filter",
                openapi.IN_QUERY,
                description="active (pending review) or old (already resolved)",
                type=openapi.TYPE_STRING,
                enum=list(FlagQuery.FILTERS),
                required=False,
            ),
            openapi.Parameter(
                "limit",
                openapi.IN_QUERY,
                description="Maximum number of posts",
                type=openapi.TYPE_INTEGER,
                required=False,
            ),
        ],
        responses={
            200: openapi.Schema(
                type=openapi.TYPE_OBJECT,
                properties={
                    "users": openapi.Schema(
                        type=openapi.TYPE_ARRAY,
                        items=openapi.Schema(type=openapi.TYPE_OBJECT),
                    ),
                    "flagged_posts": openapi.Schema(
                        type=openapi.TYPE_ARRAY,
                        items=openapi.Schema(type=openapi.TYPE_OBJECT),
                    ),
                },
            ),
            401: error_schema,
            403: error_schema,
        },
    )
    def get(self, request, format=None):
        query = FlagQuery(
            filter=request.query_params.get("filter", "active"),
            limit=request.query_params.get("limit"),
        )
        return Response(
            {
                "users": FlagUserSerializer(query.users(), many=True).data,
                "flagged_posts": FlaggedPostSerializer(
                    query.flagged_posts(), many=True
                ).data,
            },
            status=status.HTTP_200_OK,
        )


class ResolveFlagAPI(APIView):
    """Shared response shape for agree, disagree and defer."""

    permission_classes = [IsModerationStaff]

    def resolved(self, reviewable):
        reviewable.refresh_from_db()
        return Response(
            {"success": "OK", "reviewable": ReviewableSerializer(reviewable).data},
            status=status.HTTP_200_OK,
        )


class AgreeFlagAPI(ResolveFlagAPI):
    """
    Agree with the flags on a post, keeping or deleting the post.
    """

    @swagger_auto_schema(
        operation_description=(
            "Agree with the flags on a post. action_on_post=delete also removes "
            "the post and notifies its author."
        ),
        request_body=AgreeFlagSerializer,
        responses={
            200: resolution_schema,
            400: error_schema,
            403: error_schema,
            404: error_schema,
            409: error_schema,
        },
    )
    def post(self, request, post_id, format=None):
        serializer = AgreeFlagSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        reviewable = ModerationEngine().agree(
            post_id,
            request.user,
            action_on_post=serializer.validated_data["action_on_post"],
        )
        return self.resolved(reviewable)


class DisagreeFlagAPI(ResolveFlagAPI):
    """
    Disagree with the flags on a post, restoring it and lifting spam silences.
    """

    @swagger_auto_schema(
        operation_description="Disagree with the flags on a post.",
        responses={200: resolution_schema, 404: error_schema, 409: error_schema},
    )
    def post(self, request, post_id, format=None):
        reviewable = ModerationEngine().disagree(post_id, request.user)
        return self.resolved(reviewable)


class DeferFlagAPI(ResolveFlagAPI):
    """
    Defer the flags on a post without taking a side.
    """

    @swagger_auto_schema(
        operation_description="Defer the flags on a post (marks them ignored).",
        responses={200: resolution_schema, 404: error_schema, 409: error_schema},
    )
    def post(self, request, post_id, format=None):
        reviewable = ModerationEngine().defer(post_id, request.user)
        return self.resolved(reviewable)
