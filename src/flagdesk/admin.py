from django.contrib import admin
from django.utils.html import format_html

from .models import (
    Category,
    Notification,
    Post,
    PostAction,
    Reviewable,
    ReviewableHistory,
    ReviewableScore,
    Topic,
    User,
    UserStat,
)

# =============================================================================
# USER MANAGEMENT
# =============================================================================


class UserStatInline(admin.StackedInline):
    model = UserStat
    can_delete = False
    readonly_fields = ("flags_agreed", "flags_disagreed", "flags_ignored")


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = (
        "user_id",
        "username",
        "email",
        "role",
        "trust_level",
        "get_silenced_status",
        "is_active_status",
    )
    list_filter = ("role", "trust_level", "is_active", "is_staff")
    search_fields = ("username", "full_name", "email")
    readonly_fields = ("user_id", "last_login", "created_at", "updated_at")
    inlines = (UserStatInline,)

    fieldsets = (
        (
            "Account",
            {"fields": ("user_id", "username", "full_name", "email", "role")},
        ),
        (
            "Trust & Penalties",
            {"fields": ("trust_level", "silenced_till", "silence_reason")},
        ),
        ("Preferences", {"fields": ("preferred_language",)}),
        (
            "System Fields",
            {
                "fields": (
                    "is_staff",
                    "is_superuser",
                    "is_active",
                    "is_deleted",
                    "last_login",
                    "created_at",
                    "updated_at",
                ),
                "classes": ("collapse",),
            },
        ),
    )

    def get_silenced_status(self, obj):
        if obj.is_silenced:
            return format_html(
                '<span style="color: red;">Until {}</span>',
                obj.silenced_till.strftime("%Y-%m-%d"),
            )
        return format_html('<span style="color: green;">No</span>')

    get_silenced_status.short_description = "Silenced"

    def is_active_status(self, obj):
        if obj.is_active == 1:
            return format_html('<span style="color: green;">Active</span>')
        return format_html('<span style="color: red;">Inactive</span>')

    is_active_status.short_description = "Status"


# =============================================================================
# CONTENT
# =============================================================================


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("category_id", "name", "slug", "topic")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}
    raw_id_fields = ("topic",)


@admin.register(Topic)
class TopicAdmin(admin.ModelAdmin):
    list_display = (
        "topic_id",
        "title",
        "author",
        "archetype",
        "category",
        "get_deleted_status",
        "created_at",
    )
    list_filter = ("archetype", "visible", "category")
    search_fields = ("title", "author__username")
    readonly_fields = ("topic_id", "created_at", "updated_at")
    raw_id_fields = ("author", "category", "deleted_by")

    def get_deleted_status(self, obj):
        if obj.deleted_at:
            return format_html('<span style="color: red;">Deleted</span>')
        return format_html('<span style="color: green;">Live</span>')

    get_deleted_status.short_description = "State"


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = (
        "post_id",
        "topic",
        "post_number",
        "author",
        "spam_count",
        "inappropriate_count",
        "get_state",
    )
    list_filter = ("hidden",)
    search_fields = ("raw", "author__username", "topic__title")
    readonly_fields = ("post_id", "created_at", "updated_at", *Post.FLAG_COUNT_FIELDS)
    raw_id_fields = ("topic", "author", "deleted_by")

    def get_state(self, obj):
        if obj.deleted_at:
            return format_html('<span style="color: red;">Deleted</span>')
        if obj.hidden:
            return format_html('<span style="color: orange;">Hidden</span>')
        return format_html('<span style="color: green;">Visible</span>')

    get_state.short_description = "State"


# =============================================================================
# FLAGS & REVIEW QUEUE
# =============================================================================


@admin.register(PostAction)
class PostActionAdmin(admin.ModelAdmin):
    list_display = (
        "post_action_id",
        "post",
        "user",
        "post_action_type",
        "agreed_at",
        "disagreed_at",
        "deferred_at",
    )
    list_filter = ("post_action_type",)
    search_fields = ("user__username", "message")
    readonly_fields = ("post_action_id", "created_at", "updated_at")
    raw_id_fields = ("post", "user", "agreed_by", "disagreed_by", "deferred_by")


class ReviewableScoreInline(admin.TabularInline):
    model = ReviewableScore
    extra = 0
    can_delete = False
    readonly_fields = (
        "user",
        "post_action",
        "post_action_type",
        "score",
        "status",
        "reviewed_by",
        "reviewed_at",
    )


class ReviewableHistoryInline(admin.TabularInline):
    model = ReviewableHistory
    extra = 0
    can_delete = False
    readonly_fields = ("reviewable_history_type", "status", "created_by", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Reviewable)
class ReviewableAdmin(admin.ModelAdmin):
    list_display = (
        "reviewable_id",
        "target_post",
        "target_created_by",
        "get_status",
        "score",
        "created_at",
    )
    list_filter = ("status", "created_at")
    search_fields = ("target_created_by__username",)
    readonly_fields = ("reviewable_id", "status", "score", "version", "created_at", "updated_at")
    raw_id_fields = ("target_post", "target_created_by", "topic", "category", "created_by")
    inlines = (ReviewableScoreInline, ReviewableHistoryInline)
    date_hierarchy = "created_at"

    def get_status(self, obj):
        colors = {"pending": "orange", "approved": "green", "rejected": "red"}
        return format_html(
            '<span style="color: {};">{}</span>',
            colors.get(obj.status, "gray"),
            obj.get_status_display(),
        )

    get_status.short_description = "Status"

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(ReviewableScore)
class ReviewableScoreAdmin(admin.ModelAdmin):
    list_display = ("reviewable_score_id", "reviewable", "user", "post_action_type", "score", "status")
    list_filter = ("post_action_type", "status")
    raw_id_fields = ("reviewable", "user", "post_action", "reviewed_by")


@admin.register(ReviewableHistory)
class ReviewableHistoryAdmin(admin.ModelAdmin):
    list_display = (
        "reviewable_history_id",
        "reviewable",
        "reviewable_history_type",
        "status",
        "created_by",
        "created_at",
    )
    list_filter = ("reviewable_history_type", "status")
    date_hierarchy = "created_at"

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =============================================================================
# NOTIFICATIONS
# =============================================================================


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = (
        "notification_id",
        "get_user_name",
        "title",
        "type",
        "get_read_status",
        "created_at",
    )
    list_filter = ("type", "is_read", "created_at")
    search_fields = ("user__username", "title", "message")
    readonly_fields = ("notification_id", "created_at", "updated_at")
    raw_id_fields = ("user", "topic")

    def get_user_name(self, obj):
        return obj.user.username if obj.user else "System"

    get_user_name.short_description = "User"

    def get_read_status(self, obj):
        if obj.is_read == 1:
            return format_html('<span style="color: green;">Read</span>')
        return format_html('<span style="color: orange;">Unread</span>')

    get_read_status.short_description = "Status"


admin.site.site_header = "Flagdesk Admin"
admin.site.site_title = "Flagdesk Admin"
admin.site.index_title = "Flag moderation"
