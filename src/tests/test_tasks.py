"""
Unit tests for Celery tasks.

Tasks run eagerly in the test settings.
"""

from datetime import timedelta

import pytest
from django.utils import timezone


@pytest.mark.unit
class TestSendDispositionMessageTask:
    def test_sends_private_message(self, test_user):
        from flagdesk.models import TopicAllowedUser
        from flagdesk.tasks import send_disposition_message_task

        result = send_disposition_message_task.delay(
            test_user.user_id, "flags_dispositions.disagreed"
        ).get()

        membership = TopicAllowedUser.objects.get(user=test_user)
        assert result == {"topic_id": membership.topic_id}
        assert membership.topic.posts.get().raw == (
            "Thanks for letting us know. We're looking into it."
        )


@pytest.mark.unit
class TestNotifyContentOwnerTask:
    def test_notifies_author(self, test_post):
        from flagdesk.models import Notification
        from flagdesk.tasks import notify_content_owner_task

        notify_content_owner_task.delay(test_post.post_id)

        notification = Notification.objects.get(user=test_post.author)
        assert notification.title == "Your post was removed"
        assert test_post.topic.title in notification.message


@pytest.mark.unit
class TestUnsilenceExpiredUsersTask:
    def test_clears_expired_silences_only(self, test_user, new_user):
        from flagdesk.tasks import unsilence_expired_users_task

        test_user.silenced_till = timezone.now() - timedelta(hours=1)
        test_user.silence_reason = "manual"
        test_user.save()
        new_user.silenced_till = timezone.now() + timedelta(days=3)
        new_user.save()

        result = unsilence_expired_users_task()

        assert result == {"unsilenced": 1}
        test_user.refresh_from_db()
        new_user.refresh_from_db()
        assert test_user.silenced_till is None
        assert test_user.silence_reason is None
        assert new_user.is_silenced


@pytest.mark.unit
class TestAutoDeferStaleFlagsTask:
    def test_defers_old_pending_flags(self, flagged_post, flagger):
        from flagdesk.models import Reviewable, User
        from flagdesk.tasks import auto_defer_stale_flags_task

        reviewable = Reviewable.objects.get(target_post=flagged_post)
        Reviewable.objects.filter(pk=reviewable.pk).update(
            created_at=timezone.now() - timedelta(days=45)
        )

        result = auto_defer_stale_flags_task(days=30)

        assert result == {"deferred": 1}
        reviewable.refresh_from_db()
        assert reviewable.status == "ignored"
        history = reviewable.reviewable_histories.last()
        assert history.created_by == User.objects.system_user()

        flagger.refresh_from_db()
        assert flagger.user_stat.flags_ignored == 1

    def test_leaves_recent_flags(self, flagged_post):
        from flagdesk.models import Reviewable
        from flagdesk.tasks import auto_defer_stale_flags_task

        assert auto_defer_stale_flags_task(days=30) == {"deferred": 0}
        assert Reviewable.objects.get(target_post=flagged_post).status == "pending"

    def test_management_command(self, flagged_post):
        from io import StringIO

        from django.core.management import call_command

        from flagdesk.models import Reviewable

        Reviewable.objects.filter(target_post=flagged_post).update(
            created_at=timezone.now() - timedelta(days=10)
        )
        out = StringIO()
        call_command("defer_stale_flags", "--days", "7", stdout=out)

        assert "Deferred 1 stale flag(s)" in out.getvalue()
