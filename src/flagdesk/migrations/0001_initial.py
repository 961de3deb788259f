# Initial schema for flagdesk.
#
# Creates:
# 1. Users and their flag statistics
# 2. Forum content: categories, topics, private-message membership, posts
# 3. Flags (post actions)
# 4. Reviewables with their scores and append-only history
# 5. Notifications

import django.db.models.deletion
from django.db import migrations, models

import flagdesk.models.user

STATUS_CHOICES = [
    ("pending", "Pending"),
    ("approved", "Approved"),
    ("rejected", "Rejected"),
    ("ignored", "Ignored"),
]

FLAG_TYPE_CHOICES = [
    ("spam", "Spam"),
    ("inappropriate", "Inappropriate"),
    ("off_topic", "Off Topic"),
    ("notify_moderators", "Notify Moderators"),
]


def audit_fields():
    """Columns every BaseModel subclass carries."""
    return [
        (
            "is_active",
            models.IntegerField(
                db_column="IsActive",
                blank=True,
                null=True,
                default=1,
                help_text="1 while the row is live, 0 once deactivated",
            ),
        ),
        (
            "is_deleted",
            models.IntegerField(
                db_column="IsDeleted",
                blank=True,
                null=True,
                default=0,
                help_text="1 once the row is soft-deleted",
            ),
        ),
        *timestamp_fields(),
        (
            "created_by",
            models.IntegerField(
                db_column="CreatedBy",
                blank=True,
                null=True,
                help_text="user_id of the creator",
            ),
        ),
        (
            "updated_by",
            models.IntegerField(
                db_column="UpdatedBy",
                blank=True,
                null=True,
                help_text="user_id of the last editor",
            ),
        ),
    ]


def timestamp_fields():
    return [
        (
            "created_at",
            models.DateTimeField(
                db_column="CreatedAt",
                auto_now_add=True,
                null=True,
                help_text="Row creation time",
            ),
        ),
        (
            "updated_at",
            models.DateTimeField(
                db_column="UpdatedAt",
                auto_now=True,
                null=True,
                help_text="Last modification time",
            ),
        ),
    ]


def moderatable_fields():
    """Visibility and deletion columns shared by topics and posts."""
    return [
        (
            "hidden",
            models.BooleanField(
                db_column="Hidden",
                default=False,
                help_text="Whether the content is hidden pending review",
            ),
        ),
        (
            "hidden_at",
            models.DateTimeField(
                db_column="HiddenAt",
                blank=True,
                null=True,
                help_text="When the content was hidden",
            ),
        ),
        (
            "hidden_reason",
            models.CharField(
                db_column="HiddenReason",
                max_length=40,
                blank=True,
                null=True,
                help_text="Why the content was hidden",
            ),
        ),
        (
            "deleted_at",
            models.DateTimeField(
                db_column="DeletedAt",
                blank=True,
                null=True,
                help_text="When the content was deleted",
            ),
        ),
        (
            "deleted_by",
            models.ForeignKey(
                db_column="DeletedByID",
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="+",
                to="flagdesk.user",
                help_text="User who deleted the content",
            ),
        ),
    ]


def user_fk(db_column, related_name, on_delete=django.db.models.deletion.SET_NULL, **kwargs):
    if on_delete is django.db.models.deletion.SET_NULL:
        kwargs.setdefault("blank", True)
        kwargs.setdefault("null", True)
    return models.ForeignKey(
        db_column=db_column,
        on_delete=on_delete,
        related_name=related_name,
        to="flagdesk.user",
        **kwargs,
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        # =====================================================================
        # 1. Users
        # =====================================================================
        migrations.CreateModel(
            name="User",
            fields=[
                *audit_fields(),
                (
                    "user_id",
                    models.AutoField(
                        db_column="UserID",
                        primary_key=True,
                        serialize=False,
                        help_text="User primary key",
                    ),
                ),
                (
                    "username",
                    models.CharField(db_column="Username", max_length=60, help_text="Public handle"),
                ),
                (
                    "full_name",
                    models.CharField(
                        db_column="FullName",
                        max_length=255,
                        blank=True,
                        default="",
                        help_text="Display name",
                    ),
                ),
                (
                    "email",
                    models.CharField(
                        db_column="Email",
                        unique=True,
                        max_length=255,
                        help_text="Login email, unique",
                    ),
                ),
                (
                    "password",
                    models.CharField(
                        db_column="PasswordHash", max_length=255, help_text="Password hash"
                    ),
                ),
                (
                    "role",
                    models.CharField(
                        db_column="Role",
                        max_length=12,
                        choices=[
                            ("Admin", "Administrator"),
                            ("User", "Standard User"),
                            ("Moderator", "Moderator"),
                        ],
                        default="User",
                        help_text="Admin, Moderator or User",
                    ),
                ),
                (
                    "trust_level",
                    models.PositiveSmallIntegerField(
                        db_column="TrustLevel",
                        choices=[
                            (0, "New User"),
                            (1, "Basic User"),
                            (2, "Member"),
                            (3, "Regular"),
                            (4, "Leader"),
                        ],
                        default=1,
                        help_text="Trust level from 0 (new user) to 4 (leader)",
                    ),
                ),
                (
                    "is_staff",
                    models.BooleanField(
                        default=False,
                        help_text="Designates whether the user can moderate flags.",
                    ),
                ),
                (
                    "is_superuser",
                    models.BooleanField(
                        default=False,
                        help_text="Grants every permission without explicit checks.",
                    ),
                ),
                (
                    "last_login",
                    models.DateTimeField(
                        db_column="LastLogin",
                        blank=True,
                        null=True,
                        help_text="Time of the last successful login",
                    ),
                ),
                (
                    "preferred_language",
                    models.CharField(
                        db_column="PreferredLanguage",
                        max_length=10,
                        default="en",
                        help_text="Language for system messages when ALLOW_USER_LOCALE is on",
                    ),
                ),
                (
                    "silenced_till",
                    models.DateTimeField(
                        db_column="SilencedTill",
                        blank=True,
                        null=True,
                        help_text="User may not post until this time",
                    ),
                ),
                (
                    "silence_reason",
                    models.CharField(
                        db_column="SilenceReason",
                        max_length=40,
                        blank=True,
                        null=True,
                        help_text="Why the user was silenced",
                    ),
                ),
            ],
            options={
                "verbose_name": "User",
                "verbose_name_plural": "Users",
                "db_table": "Users",
                "managed": True,
                "abstract": False,
                "indexes": [
                    models.Index(fields=["email", "is_active"], name="users_email_active_idx"),
                    models.Index(fields=["role", "is_active"], name="users_role_active_idx"),
                ],
            },
            managers=[
                ("objects", flagdesk.models.user.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name="UserStat",
            fields=[
                (
                    "user",
                    models.OneToOneField(
                        db_column="UserID",
                        on_delete=django.db.models.deletion.CASCADE,
                        primary_key=True,
                        serialize=False,
                        related_name="user_stat",
                        to="flagdesk.user",
                        help_text="User these statistics belong to",
                    ),
                ),
                (
                    "flags_agreed",
                    models.PositiveIntegerField(
                        db_column="FlagsAgreed",
                        default=0,
                        help_text="Flags raised by this user that staff agreed with",
                    ),
                ),
                (
                    "flags_disagreed",
                    models.PositiveIntegerField(
                        db_column="FlagsDisagreed",
                        default=0,
                        help_text="Flags raised by this user that staff disagreed with",
                    ),
                ),
                (
                    "flags_ignored",
                    models.PositiveIntegerField(
                        db_column="FlagsIgnored",
                        default=0,
                        help_text="Flags raised by this user that staff deferred",
                    ),
                ),
            ],
            options={
                "verbose_name": "User Stat",
                "verbose_name_plural": "User Stats",
                "db_table": "UserStats",
                "managed": True,
            },
        ),
        # =====================================================================
        # 2. Forum content
        # =====================================================================
        migrations.CreateModel(
            name="Category",
            fields=[
                *audit_fields(),
                (
                    "category_id",
                    models.AutoField(
                        db_column="CategoryID",
                        primary_key=True,
                        serialize=False,
                        help_text="Category primary key",
                    ),
                ),
                ("name", models.CharField(db_column="Name", max_length=50, help_text="Category name")),
                (
                    "slug",
                    models.SlugField(db_column="Slug", max_length=50, unique=True, help_text="URL slug"),
                ),
            ],
            options={
                "verbose_name": "Category",
                "verbose_name_plural": "Categories",
                "db_table": "Categories",
                "ordering": ["name"],
                "managed": True,
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Topic",
            fields=[
                *audit_fields(),
                *moderatable_fields(),
                (
                    "topic_id",
                    models.AutoField(
                        db_column="TopicID",
                        primary_key=True,
                        serialize=False,
                        help_text="Topic primary key",
                    ),
                ),
                ("title", models.CharField(db_column="Title", max_length=255, help_text="Topic title")),
                (
                    "category",
                    models.ForeignKey(
                        db_column="CategoryID",
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="topics",
                        to="flagdesk.category",
                        help_text="Category the topic belongs to",
                    ),
                ),
                (
                    "author",
                    user_fk(
                        "AuthorID",
                        "topics",
                        on_delete=django.db.models.deletion.CASCADE,
                        help_text="User who started the topic",
                    ),
                ),
                (
                    "archetype",
                    models.CharField(
                        db_column="Archetype",
                        max_length=20,
                        choices=[("regular", "Regular"), ("private_message", "Private Message")],
                        default="regular",
                        help_text="Regular topic or private message",
                    ),
                ),
                (
                    "subtype",
                    models.CharField(
                        db_column="Subtype",
                        max_length=40,
                        blank=True,
                        null=True,
                        help_text="Private message subtype (e.g. moderator_warning)",
                    ),
                ),
                (
                    "visible",
                    models.BooleanField(
                        db_column="Visible", default=True, help_text="Whether the topic is listed"
                    ),
                ),
            ],
            options={
                "verbose_name": "Topic",
                "verbose_name_plural": "Topics",
                "db_table": "Topics",
                "ordering": ["-created_at"],
                "managed": True,
                "abstract": False,
                "indexes": [
                    models.Index(fields=["archetype", "created_at"], name="topics_archetype_idx"),
                ],
            },
        ),
        migrations.AddField(
            model_name="category",
            name="topic",
            field=models.ForeignKey(
                db_column="TopicID",
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="defined_categories",
                to="flagdesk.topic",
                help_text="Topic describing this category",
            ),
        ),
        migrations.CreateModel(
            name="TopicAllowedUser",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "topic",
                    models.ForeignKey(
                        db_column="TopicID",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="topic_allowed_users",
                        to="flagdesk.topic",
                    ),
                ),
                (
                    "user",
                    user_fk(
                        "UserID",
                        "topic_allowed_users",
                        on_delete=django.db.models.deletion.CASCADE,
                    ),
                ),
            ],
            options={
                "db_table": "TopicAllowedUsers",
                "managed": True,
                "constraints": [
                    models.UniqueConstraint(fields=("topic", "user"), name="unique_topic_allowed_user"),
                ],
            },
        ),
        migrations.AddField(
            model_name="topic",
            name="allowed_users",
            field=models.ManyToManyField(
                related_name="private_topics",
                through="flagdesk.TopicAllowedUser",
                to="flagdesk.user",
            ),
        ),
        migrations.CreateModel(
            name="Post",
            fields=[
                *audit_fields(),
                *moderatable_fields(),
                (
                    "post_id",
                    models.AutoField(
                        db_column="PostID",
                        primary_key=True,
                        serialize=False,
                        help_text="Post primary key",
                    ),
                ),
                (
                    "topic",
                    models.ForeignKey(
                        db_column="TopicID",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="posts",
                        to="flagdesk.topic",
                        help_text="Topic this post belongs to",
                    ),
                ),
                (
                    "author",
                    user_fk(
                        "AuthorID",
                        "posts",
                        on_delete=django.db.models.deletion.CASCADE,
                        help_text="User who wrote the post",
                    ),
                ),
                (
                    "post_number",
                    models.PositiveIntegerField(
                        db_column="PostNumber",
                        default=1,
                        help_text="Position of the post within its topic (1 = first post)",
                    ),
                ),
                ("raw", models.TextField(db_column="Raw", help_text="Post body")),
                ("spam_count", models.PositiveIntegerField(db_column="SpamCount", default=0)),
                (
                    "inappropriate_count",
                    models.PositiveIntegerField(db_column="InappropriateCount", default=0),
                ),
                ("off_topic_count", models.PositiveIntegerField(db_column="OffTopicCount", default=0)),
                (
                    "notify_moderators_count",
                    models.PositiveIntegerField(db_column="NotifyModeratorsCount", default=0),
                ),
            ],
            options={
                "verbose_name": "Post",
                "verbose_name_plural": "Posts",
                "db_table": "Posts",
                "ordering": ["topic_id", "post_number"],
                "managed": True,
                "abstract": False,
                "indexes": [
                    models.Index(fields=["topic", "post_number"], name="posts_topic_number_idx"),
                    models.Index(fields=["author", "created_at"], name="posts_author_created_idx"),
                ],
            },
        ),
        # =====================================================================
        # 3. Flags
        # =====================================================================
        migrations.CreateModel(
            name="PostAction",
            fields=[
                *audit_fields(),
                (
                    "post_action_id",
                    models.AutoField(
                        db_column="PostActionID",
                        primary_key=True,
                        serialize=False,
                        help_text="Flag primary key",
                    ),
                ),
                (
                    "post",
                    models.ForeignKey(
                        db_column="PostID",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="post_actions",
                        to="flagdesk.post",
                        help_text="Flagged post",
                    ),
                ),
                (
                    "user",
                    user_fk(
                        "UserID",
                        "post_actions",
                        on_delete=django.db.models.deletion.CASCADE,
                        help_text="User who raised the flag",
                    ),
                ),
                (
                    "post_action_type",
                    models.CharField(
                        db_column="PostActionType",
                        max_length=20,
                        choices=FLAG_TYPE_CHOICES,
                        help_text="Kind of flag",
                    ),
                ),
                (
                    "message",
                    models.TextField(
                        db_column="Message",
                        blank=True,
                        default="",
                        help_text="Optional note from the flagger",
                    ),
                ),
                ("agreed_at", models.DateTimeField(db_column="AgreedAt", blank=True, null=True)),
                ("agreed_by", user_fk("AgreedByID", "+")),
                ("disagreed_at", models.DateTimeField(db_column="DisagreedAt", blank=True, null=True)),
                ("disagreed_by", user_fk("DisagreedByID", "+")),
                ("deferred_at", models.DateTimeField(db_column="DeferredAt", blank=True, null=True)),
                ("deferred_by", user_fk("DeferredByID", "+")),
            ],
            options={
                "verbose_name": "Post Action",
                "verbose_name_plural": "Post Actions",
                "db_table": "PostActions",
                "ordering": ["created_at"],
                "managed": True,
                "abstract": False,
                "indexes": [
                    models.Index(fields=["post", "post_action_type"], name="postactions_post_type_idx"),
                    models.Index(fields=["user", "post_action_type"], name="postactions_user_type_idx"),
                ],
            },
        ),
        # =====================================================================
        # 4. Reviewables
        # =====================================================================
        migrations.CreateModel(
            name="Reviewable",
            fields=[
                *timestamp_fields(),
                (
                    "reviewable_id",
                    models.AutoField(
                        db_column="ReviewableID",
                        primary_key=True,
                        serialize=False,
                        help_text="Reviewable primary key",
                    ),
                ),
                (
                    "target_post",
                    models.ForeignKey(
                        db_column="TargetPostID",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reviewables",
                        to="flagdesk.post",
                        help_text="Post under review",
                    ),
                ),
                (
                    "target_created_by",
                    user_fk(
                        "TargetCreatedByID",
                        "reviewables_against",
                        help_text="Author of the post under review",
                    ),
                ),
                (
                    "topic",
                    models.ForeignKey(
                        db_column="TopicID",
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="reviewables",
                        to="flagdesk.topic",
                    ),
                ),
                (
                    "category",
                    models.ForeignKey(
                        db_column="CategoryID",
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="reviewables",
                        to="flagdesk.category",
                    ),
                ),
                (
                    "created_by",
                    user_fk(
                        "CreatedByID",
                        "reviewables_created",
                        help_text="User whose flag opened this reviewable",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        db_column="Status",
                        max_length=20,
                        choices=STATUS_CHOICES,
                        default="pending",
                        help_text="Current moderation status",
                    ),
                ),
                (
                    "score",
                    models.FloatField(db_column="Score", default=0.0, help_text="Sum of pending flag scores"),
                ),
                (
                    "version",
                    models.PositiveIntegerField(
                        db_column="Version",
                        default=0,
                        help_text="Incremented on every status change",
                    ),
                ),
            ],
            options={
                "verbose_name": "Reviewable",
                "verbose_name_plural": "Reviewables",
                "db_table": "Reviewables",
                "ordering": ["-score", "-created_at"],
                "managed": True,
                "abstract": False,
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="reviewables_status_idx"),
                    models.Index(fields=["target_post", "status"], name="reviewables_post_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ReviewableScore",
            fields=[
                *timestamp_fields(),
                (
                    "reviewable_score_id",
                    models.AutoField(db_column="ReviewableScoreID", primary_key=True, serialize=False),
                ),
                (
                    "reviewable",
                    models.ForeignKey(
                        db_column="ReviewableID",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="scores",
                        to="flagdesk.reviewable",
                    ),
                ),
                (
                    "user",
                    user_fk(
                        "UserID",
                        "reviewable_scores",
                        on_delete=django.db.models.deletion.CASCADE,
                        help_text="Flagger",
                    ),
                ),
                (
                    "post_action",
                    models.ForeignKey(
                        db_column="PostActionID",
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="reviewable_scores",
                        to="flagdesk.postaction",
                    ),
                ),
                (
                    "post_action_type",
                    models.CharField(db_column="PostActionType", max_length=20, choices=FLAG_TYPE_CHOICES),
                ),
                ("score", models.FloatField(db_column="Score", default=0.0)),
                (
                    "status",
                    models.CharField(
                        db_column="Status", max_length=20, choices=STATUS_CHOICES, default="pending"
                    ),
                ),
                ("reviewed_by", user_fk("ReviewedByID", "+")),
                ("reviewed_at", models.DateTimeField(db_column="ReviewedAt", blank=True, null=True)),
            ],
            options={
                "verbose_name": "Reviewable Score",
                "verbose_name_plural": "Reviewable Scores",
                "db_table": "ReviewableScores",
                "managed": True,
                "abstract": False,
                "indexes": [
                    models.Index(fields=["reviewable", "status"], name="revscores_reviewable_idx"),
                    models.Index(fields=["post_action_type", "status"], name="revscores_type_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ReviewableHistory",
            fields=[
                (
                    "reviewable_history_id",
                    models.AutoField(db_column="ReviewableHistoryID", primary_key=True, serialize=False),
                ),
                (
                    "reviewable",
                    models.ForeignKey(
                        db_column="ReviewableID",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="reviewable_histories",
                        to="flagdesk.reviewable",
                    ),
                ),
                (
                    "reviewable_history_type",
                    models.CharField(
                        db_column="ReviewableHistoryType",
                        max_length=20,
                        choices=[("created", "Created"), ("transitioned", "Transitioned")],
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        db_column="Status",
                        max_length=20,
                        choices=STATUS_CHOICES,
                        help_text="Reviewable status after this entry",
                    ),
                ),
                (
                    "created_by",
                    user_fk(
                        "CreatedByID",
                        "reviewable_histories",
                        on_delete=django.db.models.deletion.PROTECT,
                        help_text="User responsible for the entry",
                    ),
                ),
                ("created_at", models.DateTimeField(db_column="CreatedAt", auto_now_add=True)),
            ],
            options={
                "verbose_name": "Reviewable History",
                "verbose_name_plural": "Reviewable Histories",
                "db_table": "ReviewableHistories",
                "ordering": ["created_at", "reviewable_history_id"],
                "managed": True,
                "abstract": False,
            },
        ),
        # =====================================================================
        # 5. Notifications
        # =====================================================================
        migrations.CreateModel(
            name="Notification",
            fields=[
                *audit_fields(),
                (
                    "notification_id",
                    models.AutoField(
                        db_column="NotificationID",
                        primary_key=True,
                        serialize=False,
                        help_text="Notification primary key",
                    ),
                ),
                (
                    "user",
                    user_fk(
                        "UserID",
                        "notifications",
                        on_delete=django.db.models.deletion.CASCADE,
                        help_text="Recipient",
                    ),
                ),
                ("title", models.TextField(db_column="Title", help_text="One-line headline")),
                (
                    "message",
                    models.TextField(db_column="Message", help_text="Body text"),
                ),
                (
                    "type",
                    models.CharField(
                        db_column="Type",
                        max_length=10,
                        choices=[("Moderation", "MODERATION"), ("System", "SYSTEM")],
                        default="System",
                        help_text="Kind of notice",
                    ),
                ),
                (
                    "topic",
                    models.ForeignKey(
                        db_column="TopicID",
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="flagdesk.topic",
                        help_text="Conversation holding the full message, if any",
                    ),
                ),
                (
                    "is_read",
                    models.IntegerField(
                        db_column="IsRead",
                        default=0,
                        help_text="1 once the recipient has opened it",
                    ),
                ),
            ],
            options={
                "verbose_name": "Notification",
                "verbose_name_plural": "Notifications",
                "db_table": "Notifications",
                "ordering": ["-created_at"],
                "managed": True,
                "abstract": False,
                "indexes": [
                    models.Index(fields=["user", "is_read", "created_at"], name="notifications_user_read_idx"),
                    models.Index(fields=["type", "created_at"], name="notifications_type_idx"),
                ],
            },
        ),
    ]
