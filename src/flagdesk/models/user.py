# flagdesk/models/user.py
"""
Accounts, their trust and silence state, and per-user flag counters.
"""

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import models
from django.utils import timezone

from .base import BaseModel


class Role:
    """User role constants."""

    ADMIN = "Admin"
    USER = "User"
    MODERATOR = "Moderator"

    CHOICES = [
        (ADMIN, "Administrator"),
        (USER, "Standard User"),
        (MODERATOR, "Moderator"),
    ]

    STAFF = (ADMIN, MODERATOR)


class TrustLevel:
    """Trust level constants (0 = brand new, 4 = leader)."""

    NEW_USER = 0
    BASIC = 1
    MEMBER = 2
    REGULAR = 3
    LEADER = 4

    CHOICES = [
        (NEW_USER, "New User"),
        (BASIC, "Basic User"),
        (MEMBER, "Member"),
        (REGULAR, "Regular"),
        (LEADER, "Leader"),
    ]


class UserManager(BaseUserManager):
    use_in_migrations = True

    def create_user(self, email, password=None, **extra_fields):
        """Moderators and admins get is_staff unless told otherwise."""
        if not email:
            raise ValueError("An email address is required")
        email = self.normalize_email(email)
        extra_fields.setdefault("username", email.split("@")[0])
        extra_fields.setdefault("role", Role.USER)
        extra_fields.setdefault("is_staff", extra_fields["role"] in Role.STAFF)

        user = self.model(email=email, is_active=1, is_deleted=0, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.update(role=Role.ADMIN, is_staff=True, is_superuser=True)
        extra_fields.setdefault("trust_level", TrustLevel.LEADER)
        return self.create_user(email, password, **extra_fields)

    def system_user(self):
        """Return the account that sends system messages, creating it once."""
        email = getattr(settings, "SYSTEM_USER_EMAIL", "system@flagdesk.local")
        user = self.filter(email=email).first()
        if user is None:
            user = self.create_user(
                email,
                password=None,
                username="system",
                full_name="System",
                role=Role.ADMIN,
                trust_level=TrustLevel.LEADER,
            )
        return user


class User(AbstractBaseUser, BaseModel):
    """
    A forum account. Logs in by email; trust_level feeds flag scoring and
    auto-silence, and silenced_till is managed by PenaltyTracker.
    """

    user_id = models.AutoField(
        db_column="UserID",
        primary_key=True,
        help_text="User primary key",
    )
    username = models.CharField(
        db_column="Username",
        max_length=60,
        help_text="Public handle",
    )
    full_name = models.CharField(
        db_column="FullName",
        max_length=255,
        blank=True,
        default="",
        help_text="Display name",
    )
    email = models.CharField(
        db_column="Email",
        unique=True,
        max_length=255,
        help_text="Login email, unique",
    )
    password = models.CharField(
        db_column="PasswordHash",
        max_length=255,
        help_text="Password hash",
    )
    role = models.CharField(
        db_column="Role",
        max_length=12,
        choices=Role.CHOICES,
        default=Role.USER,
        help_text="Admin, Moderator or User",
    )
    trust_level = models.PositiveSmallIntegerField(
        db_column="TrustLevel",
        choices=TrustLevel.CHOICES,
        default=TrustLevel.BASIC,
        help_text="Trust level from 0 (new user) to 4 (leader)",
    )

    # Django auth integration fields
    is_staff = models.BooleanField(
        default=False,
        help_text="Designates whether the user can moderate flags.",
    )
    is_superuser = models.BooleanField(
        default=False,
        help_text="Grants every permission without explicit checks.",
    )
    last_login = models.DateTimeField(
        db_column="LastLogin",
        blank=True,
        null=True,
        help_text="Time of the last successful login",
    )

    preferred_language = models.CharField(
        db_column="PreferredLanguage",
        max_length=10,
        default="en",
        help_text="Language for system messages when ALLOW_USER_LOCALE is on",
    )

    # Penalties
    silenced_till = models.DateTimeField(
        db_column="SilencedTill",
        blank=True,
        null=True,
        help_text="User may not post until this time",
    )
    silence_reason = models.CharField(
        db_column="SilenceReason",
        max_length=40,
        blank=True,
        null=True,
        help_text="Why the user was silenced",
    )

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        managed = True
        db_table = "Users"
        verbose_name = "User"
        verbose_name_plural = "Users"
        indexes = [
            models.Index(fields=["email", "is_active"], name="users_email_active_idx"),
            models.Index(fields=["role", "is_active"], name="users_role_active_idx"),
        ]
        app_label = "flagdesk"

    def __str__(self) -> str:
        return f"{self.username} ({self.email})"

    @property
    def id(self) -> int:
        """user_id under the name Django and DRF look for."""
        return self.user_id

    @property
    def is_silenced(self) -> bool:
        return bool(self.silenced_till and self.silenced_till > timezone.now())

    @property
    def is_moderation_staff(self) -> bool:
        return bool(self.is_staff or self.role in Role.STAFF)

    def clean(self) -> None:
        if self.email:
            try:
                validate_email(self.email)
            except ValidationError:
                raise ValidationError(
                    {"email": "Not a valid email address."}
                ) from None

    def has_perm(self, perm, obj=None) -> bool:
        # Django admin access; flag review is gated by IsModerationStaff
        return bool(self.is_superuser or self.role == Role.ADMIN)

    def has_module_perms(self, app_label) -> bool:
        return self.has_perm(None)


class UserStat(models.Model):
    """
    Aggregate flag counters for a user.

    Incremented by PenaltyTracker with F() expressions each time a
    moderator resolves a flag this user raised.
    """

    user = models.OneToOneField(
        User,
        models.CASCADE,
        db_column="UserID",
        primary_key=True,
        related_name="user_stat",
        help_text="User these statistics belong to",
    )
    flags_agreed = models.PositiveIntegerField(
        db_column="FlagsAgreed",
        default=0,
        help_text="Flags raised by this user that staff agreed with",
    )
    flags_disagreed = models.PositiveIntegerField(
        db_column="FlagsDisagreed",
        default=0,
        help_text="Flags raised by this user that staff disagreed with",
    )
    flags_ignored = models.PositiveIntegerField(
        db_column="FlagsIgnored",
        default=0,
        help_text="Flags raised by this user that staff deferred",
    )

    class Meta:
        managed = True
        db_table = "UserStats"
        verbose_name = "User Stat"
        verbose_name_plural = "User Stats"
        app_label = "flagdesk"

    def __str__(self):
        return (
            f"UserStat {self.user_id}: +{self.flags_agreed} "
            f"-{self.flags_disagreed} ~{self.flags_ignored}"
        )
