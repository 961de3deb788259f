from rest_framework import serializers

from flagdesk.models import (
    Disposition,
    Post,
    PostAction,
    Reviewable,
    ReviewableHistory,
    User,
)


class FlagUserSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(source="user_id", read_only=True)
    silenced = serializers.BooleanField(source="is_silenced", read_only=True)
    flags_agreed = serializers.SerializerMethodField()
    flags_disagreed = serializers.SerializerMethodField()
    flags_ignored = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "full_name",
            "role",
            "trust_level",
            "silenced",
            "silenced_till",
            "flags_agreed",
            "flags_disagreed",
            "flags_ignored",
        ]
        read_only_fields = fields

    def _stat(self, obj, field):
        try:
            return getattr(obj.user_stat, field)
        except User.user_stat.RelatedObjectDoesNotExist:
            return 0

    def get_flags_agreed(self, obj):
        return self._stat(obj, "flags_agreed")

    def get_flags_disagreed(self, obj):
        return self._stat(obj, "flags_disagreed")

    def get_flags_ignored(self, obj):
        return self._stat(obj, "flags_ignored")


class PostActionSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(source="post_action_id", read_only=True)
    user_id = serializers.IntegerField(read_only=True)
    agreed_by_id = serializers.IntegerField(read_only=True)
    disagreed_by_id = serializers.IntegerField(read_only=True)
    deferred_by_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = PostAction
        fields = [
            "id",
            "user_id",
            "post_action_type",
            "message",
            "created_at",
            "agreed_at",
            "agreed_by_id",
            "disagreed_at",
            "disagreed_by_id",
            "deferred_at",
            "deferred_by_id",
        ]
        read_only_fields = fields


class ReviewableHistorySerializer(serializers.ModelSerializer):
    created_by_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = ReviewableHistory
        fields = ["reviewable_history_type", "status", "created_by_id", "created_at"]
        read_only_fields = fields


class ReviewableSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(source="reviewable_id", read_only=True)
    target_post_id = serializers.IntegerField(read_only=True)
    target_created_by_id = serializers.IntegerField(read_only=True)
    history = ReviewableHistorySerializer(
        source="reviewable_histories", many=True, read_only=True
    )

    class Meta:
        model = Reviewable
        fields = [
            "id",
            "status",
            "score",
            "version",
            "target_post_id",
            "target_created_by_id",
            "created_at",
            "updated_at",
            "history",
        ]
        read_only_fields = fields


class FlaggedPostSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(source="post_id", read_only=True)
    topic_id = serializers.IntegerField(read_only=True)
    topic_title = serializers.CharField(source="topic.title", read_only=True)
    user_id = serializers.IntegerField(source="author_id", read_only=True)
    deleted = serializers.SerializerMethodField()
    post_actions = PostActionSerializer(many=True, read_only=True)
    reviewable_id = serializers.SerializerMethodField()
    reviewable_status = serializers.SerializerMethodField()
    reviewable_score = serializers.SerializerMethodField()

    class Meta:
        model = Post
        fields = [
            "id",
            "topic_id",
            "topic_title",
            "post_number",
            "user_id",
            "raw",
            "hidden",
            "hidden_at",
            "deleted",
            "deleted_at",
            "spam_count",
            "inappropriate_count",
            "off_topic_count",
            "notify_moderators_count",
            "created_at",
            "post_actions",
            "reviewable_id",
            "reviewable_status",
            "reviewable_score",
        ]
        read_only_fields = fields

    def _reviewable(self, obj):
        from flagdesk.services.flag_query import FlagQuery

        return FlagQuery.latest_reviewable(obj)

    def get_deleted(self, obj):
        return obj.deleted_at is not None

    def get_reviewable_id(self, obj):
        reviewable = self._reviewable(obj)
        return reviewable.reviewable_id if reviewable else None

    def get_reviewable_status(self, obj):
        reviewable = self._reviewable(obj)
        return reviewable.status if reviewable else None

    def get_reviewable_score(self, obj):
        reviewable = self._reviewable(obj)
        return reviewable.score if reviewable else None


class AgreeFlagSerializer(serializers.Serializer):
    action_on_post = serializers.ChoiceField(
        choices=Disposition.values(),
        required=False,
        allow_blank=True,
        default=Disposition.KEEP.value,
        help_text="keep or delete",
    )
