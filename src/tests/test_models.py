"""
Unit tests for flagdesk models.
"""

from datetime import timedelta

import pytest
from django.utils import timezone


@pytest.mark.unit
class TestUser:
    def test_create_user(self):
        from flagdesk.models import Role, TrustLevel, User

        user = User.objects.create_user(email="Someone@Example.com", password="secret123")

        assert user.username == "Someone"
        assert user.role == Role.USER
        assert user.trust_level == TrustLevel.BASIC
        assert user.check_password("secret123")
        assert not user.is_moderation_staff

    def test_create_user_requires_email(self):
        from flagdesk.models import User

        with pytest.raises(ValueError):
            User.objects.create_user(email="", password="x")

    def test_superuser_is_staff(self, admin_user):
        assert admin_user.is_staff
        assert admin_user.is_superuser
        assert admin_user.is_moderation_staff

    def test_moderator_is_staff(self, moderator):
        assert moderator.is_moderation_staff

    def test_is_silenced(self, test_user):
        assert not test_user.is_silenced

        test_user.silenced_till = timezone.now() + timedelta(days=1)
        assert test_user.is_silenced

        test_user.silenced_till = timezone.now() - timedelta(minutes=1)
        assert not test_user.is_silenced

    def test_system_user_is_created_once(self):
        from flagdesk.models import User

        first = User.objects.system_user()
        second = User.objects.system_user()

        assert first.pk == second.pk
        assert first.username == "system"
        assert not first.has_usable_password()


@pytest.mark.unit
class TestContent:
    def test_is_first_post(self, test_post, first_post):
        assert first_post.is_first_post
        assert not test_post.is_first_post

    def test_trash_and_recover(self, test_post, admin_user):
        test_post.trash(admin_user)
        test_post.refresh_from_db()
        assert test_post.deleted_at is not None
        assert test_post.is_deleted == 1

        test_post.recover()
        test_post.refresh_from_db()
        assert test_post.deleted_at is None
        assert test_post.deleted_by is None

    def test_flag_type_counter_fields(self):
        from flagdesk.models import Post, PostActionType

        assert {t.counter_field for t in PostActionType} == set(Post.FLAG_COUNT_FIELDS)


@pytest.mark.unit
class TestReviewable:
    def test_cannot_be_deleted(self, flagged_post):
        from flagdesk.exceptions import ImmutableRecordError
        from flagdesk.models import Reviewable

        reviewable = Reviewable.objects.get(target_post=flagged_post)

        with pytest.raises(ImmutableRecordError):
            reviewable.delete()
        assert Reviewable.objects.filter(pk=reviewable.pk).exists()

    def test_transition_resolves_scores(self, flagged_post, admin_user):
        from flagdesk.models import Reviewable, ReviewableStatus

        reviewable = Reviewable.objects.get(target_post=flagged_post)
        reviewable.transition_to(ReviewableStatus.APPROVED, admin_user)

        score = reviewable.scores.get()
        assert score.status == "approved"
        assert score.reviewed_by_id == admin_user.user_id
        assert reviewable.version == 1
        assert list(Reviewable.objects.pending()) == []
        assert list(Reviewable.objects.resolved()) == [reviewable]

    def test_decision_target_status(self):
        from flagdesk.models import Decision, ReviewableStatus

        assert Decision.AGREE.target_status == ReviewableStatus.APPROVED
        assert Decision.DISAGREE.target_status == ReviewableStatus.REJECTED
        assert Decision.DEFER.target_status == ReviewableStatus.IGNORED


@pytest.mark.unit
class TestReviewableHistory:
    def test_is_append_only(self, flagged_post):
        from flagdesk.exceptions import ImmutableRecordError
        from flagdesk.models import ReviewableHistory

        history = ReviewableHistory.objects.get(reviewable__target_post=flagged_post)

        history.status = "approved"
        with pytest.raises(ImmutableRecordError):
            history.save()
        with pytest.raises(ImmutableRecordError):
            history.delete()

        history.refresh_from_db()
        assert history.status == "pending"


@pytest.mark.unit
class TestPostAction:
    def test_open_excludes_resolved(self, flagged_post, admin_user):
        from flagdesk.models import PostAction

        post_action = PostAction.objects.get(post=flagged_post)
        assert post_action.is_open
        assert PostAction.objects.open().count() == 1

        post_action.stamp("deferred", admin_user)

        assert not post_action.is_open
        assert PostAction.objects.open().count() == 0
        assert post_action.deferred_by_id == admin_user.user_id


@pytest.mark.unit
class TestNotification:
    def test_mark_as_read(self, test_user):
        from flagdesk.models import Notification

        notification = Notification.objects.create(
            user=test_user, title="Hello", message="World", type="System"
        )
        notification.mark_as_read()

        notification.refresh_from_db()
        assert notification.is_read == 1
