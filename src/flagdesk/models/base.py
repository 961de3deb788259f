# flagdesk/models/base.py
"""
Abstract bases: audit columns (BaseModel), timestamps only
(TimeStampedModel), and insert-once rows (AppendOnlyModel).
"""

from typing import Any

from django.db import models

from flagdesk.exceptions import ImmutableRecordError


class BaseModel(models.Model):
    """Soft-delete flags, timestamps and the acting user ids."""

    is_active = models.IntegerField(
        db_column="IsActive",
        blank=True,
        null=True,
        default=1,
        help_text="1 while the row is live, 0 once deactivated",
    )
    is_deleted = models.IntegerField(
        db_column="IsDeleted",
        blank=True,
        null=True,
        default=0,
        help_text="1 once the row is soft-deleted",
    )
    created_at = models.DateTimeField(
        db_column="CreatedAt",
        auto_now_add=True,
        null=True,
        help_text="Row creation time",
    )
    updated_at = models.DateTimeField(
        db_column="UpdatedAt",
        auto_now=True,
        null=True,
        help_text="Last modification time",
    )
    created_by = models.IntegerField(
        db_column="CreatedBy",
        blank=True,
        null=True,
        help_text="user_id of the creator",
    )
    updated_by = models.IntegerField(
        db_column="UpdatedBy",
        blank=True,
        null=True,
        help_text="user_id of the last editor",
    )

    class Meta:
        abstract = True
        get_latest_by = "created_at"


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(
        db_column="CreatedAt",
        auto_now_add=True,
        null=True,
        help_text="Row creation time",
    )
    updated_at = models.DateTimeField(
        db_column="UpdatedAt",
        auto_now=True,
        null=True,
        help_text="Last modification time",
    )

    class Meta:
        abstract = True
        get_latest_by = "created_at"


class AppendOnlyModel(models.Model):
    """
    Abstract base model for audit rows.

    Rows can be inserted once. Any later save() or delete() on an
    instance raises ImmutableRecordError.
    """

    class Meta:
        abstract = True

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self._state.adding:
            raise ImmutableRecordError(
                f"{self.__class__.__name__} #{self.pk} is append-only"
            )
        super().save(*args, **kwargs)

    def delete(self, *args: Any, **kwargs: Any) -> None:
        raise ImmutableRecordError(
            f"{self.__class__.__name__} #{self.pk} cannot be deleted"
        )
