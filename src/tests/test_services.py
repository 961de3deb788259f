"""
Unit tests for the moderation services.

Tests cover FlagCreator, ModerationEngine, PenaltyTracker, ContentActuator,
SystemMessenger and FlagQuery.
"""

import pytest


@pytest.mark.unit
class TestFlagCreator:
    def test_opens_reviewable_with_created_history(self, test_post, flagger):
        from flagdesk.services import FlagCreator

        result = FlagCreator.spam(flagger, test_post, message="selling things")

        assert result.success
        assert result.errors == []
        assert result.post_action.message == "selling things"

        reviewable = result.reviewable
        assert reviewable.status == "pending"
        assert reviewable.target_created_by_id == test_post.author_id
        assert reviewable.created_by_id == flagger.user_id
        history = list(reviewable.reviewable_histories.all())
        assert [h.reviewable_history_type for h in history] == ["created"]

        test_post.refresh_from_db()
        assert test_post.spam_count == 1

    def test_score_uses_trust_level(self, test_post, flagger, leader):
        from flagdesk.services import FlagCreator

        FlagCreator.spam(flagger, test_post)
        result = FlagCreator(leader, test_post, "inappropriate").perform()

        # member: 1 + 2, leader: 1 + 4
        assert result.reviewable.score == pytest.approx(8.0)

    def test_staff_bonus(self, test_post, moderator, settings):
        from flagdesk.services import FlagCreator

        settings.STAFF_FLAG_SCORE_BONUS = 5.0
        creator = FlagCreator(moderator, test_post, "off_topic")

        assert creator.score() == pytest.approx(1.0 + moderator.trust_level + 5.0)

    def test_second_flag_joins_pending_reviewable(self, test_post, flagger, leader):
        from flagdesk.models import Reviewable
        from flagdesk.services import FlagCreator

        first = FlagCreator.spam(flagger, test_post)
        second = FlagCreator.spam(leader, test_post)

        assert first.reviewable.pk == second.reviewable.pk
        assert Reviewable.objects.filter(target_post=test_post).count() == 1
        assert second.reviewable.scores.count() == 2

    def test_cannot_flag_own_post(self, test_post, test_user):
        from flagdesk.services import FlagCreator

        result = FlagCreator.spam(test_user, test_post)

        assert not result.success
        assert result.errors == ["You cannot flag your own post."]

    def test_cannot_flag_twice(self, flagged_post, flagger):
        from flagdesk.services import FlagCreator

        result = FlagCreator.spam(flagger, flagged_post)

        assert not result.success
        assert "You have already flagged this post." in result.errors

    def test_cannot_flag_deleted_post(self, test_post, flagger, admin_user):
        from flagdesk.services import FlagCreator

        test_post.trash(admin_user)
        result = FlagCreator.spam(flagger, test_post)

        assert not result.success
        assert "This post has been deleted." in result.errors

    def test_hides_post_at_threshold(self, test_post, flagger, settings):
        from flagdesk.services import FlagCreator

        settings.SCORE_TO_HIDE_POST = 3.0
        FlagCreator.spam(flagger, test_post)

        test_post.refresh_from_db()
        assert test_post.hidden
        assert test_post.hidden_reason == "flag_threshold_reached"


@pytest.mark.unit
class TestModerationEngine:
    def test_resolve_stamps_post_actions(self, flagged_post, admin_user):
        from flagdesk.models import Decision, PostAction
        from flagdesk.services import ModerationEngine

        ModerationEngine().disagree(flagged_post, admin_user)

        post_action = PostAction.objects.get(post=flagged_post)
        assert post_action.disagreed_by_id == admin_user.user_id
        assert post_action.disagreed_at is not None
        assert post_action.agreed_at is None
        assert ModerationEngine.STAMP_FIELDS[Decision.DISAGREE] == "disagreed"

    def test_resolved_reviewable_conflicts(self, flagged_post, admin_user):
        from flagdesk.exceptions import AlreadyHandledError
        from flagdesk.services import ModerationEngine

        engine = ModerationEngine()
        reviewable = engine.agree(flagged_post, admin_user)

        for decision in ("agree", "disagree", "defer"):
            with pytest.raises(AlreadyHandledError):
                engine.resolve(reviewable.pk, decision, admin_user)

        reviewable.refresh_from_db()
        assert reviewable.status == "approved"
        assert reviewable.version == 1

    def test_stale_version_conflicts(self, flagged_post, admin_user):
        from flagdesk.exceptions import AlreadyHandledError
        from flagdesk.models import Reviewable, ReviewableStatus

        stale = Reviewable.objects.get(target_post=flagged_post)
        Reviewable.objects.get(pk=stale.pk).transition_to(
            ReviewableStatus.IGNORED, admin_user
        )

        with pytest.raises(AlreadyHandledError):
            stale.transition_to(ReviewableStatus.APPROVED, admin_user)

        stale.refresh_from_db()
        assert stale.status == "ignored"

    def test_flagger_counted_once(self, flagged_post, flagger, admin_user):
        from flagdesk.services import FlagCreator, ModerationEngine

        FlagCreator(flagger, flagged_post, "inappropriate").perform()
        ModerationEngine().agree(flagged_post, admin_user)

        flagger.refresh_from_db()
        assert flagger.user_stat.flags_agreed == 1

    def test_missing_reviewable(self, test_post, admin_user):
        from flagdesk.exceptions import ReviewableNotFoundError
        from flagdesk.services import ModerationEngine

        with pytest.raises(ReviewableNotFoundError):
            ModerationEngine().defer(test_post.post_id, admin_user)

    def test_invalid_disposition(self):
        from flagdesk.exceptions import InvalidDispositionError
        from flagdesk.models import Disposition
        from flagdesk.services import ModerationEngine

        assert ModerationEngine.parse_disposition(None) == Disposition.KEEP
        assert ModerationEngine.parse_disposition("delete") == Disposition.DELETE
        with pytest.raises(InvalidDispositionError):
            ModerationEngine.parse_disposition("archive")

    def test_unknown_decision_is_rejected(self, flagged_post, admin_user):
        from flagdesk.exceptions import InvalidDecisionError
        from flagdesk.services import ModerationEngine

        reviewable = flagged_post.reviewables.get()

        with pytest.raises(InvalidDecisionError) as exc_info:
            ModerationEngine().resolve(reviewable.reviewable_id, "approve", admin_user)

        assert exc_info.value.status_code == 400
        assert str(exc_info.value.detail) == (
            "decision must be one of: agree, disagree, defer."
        )
        reviewable.refresh_from_db()
        assert reviewable.status == "pending"

    def test_protected_delete_changes_nothing(self, first_post, flagger, admin_user):
        from flagdesk.exceptions import ProtectedContentError
        from flagdesk.services import FlagCreator, ModerationEngine

        FlagCreator.spam(flagger, first_post)

        with pytest.raises(ProtectedContentError):
            ModerationEngine().agree(first_post, admin_user, action_on_post="delete")

        reviewable = first_post.reviewables.get()
        assert reviewable.status == "pending"
        assert reviewable.reviewable_histories.count() == 1

    def test_protected_post_can_be_agreed_and_kept(self, first_post, flagger, admin_user):
        from flagdesk.services import FlagCreator, ModerationEngine

        FlagCreator.spam(flagger, first_post)
        reviewable = ModerationEngine().agree(first_post, admin_user, action_on_post="keep")

        assert reviewable.status == "approved"

    def test_prefers_pending_reviewable(self, flagged_post, flagger, leader, admin_user):
        from flagdesk.services import FlagCreator, ModerationEngine

        engine = ModerationEngine()
        old = engine.defer(flagged_post, admin_user)
        new = FlagCreator.spam(leader, flagged_post).reviewable

        assert new.pk != old.pk
        assert engine.reviewable_for(flagged_post).pk == new.pk


@pytest.mark.unit
class TestPenaltyTracker:
    def test_record_counters(self, flagger, leader):
        from flagdesk.services import PenaltyTracker

        tracker = PenaltyTracker()
        tracker.record_agreed([flagger, flagger, leader])
        tracker.record_disagreed([flagger])
        tracker.record_ignored([leader])

        flagger.user_stat.refresh_from_db()
        leader.user_stat.refresh_from_db()
        assert flagger.user_stat.flags_agreed == 1
        assert flagger.user_stat.flags_disagreed == 1
        assert leader.user_stat.flags_agreed == 1
        assert leader.user_stat.flags_ignored == 1

    def test_auto_silence_needs_enough_flaggers(
        self, new_user, flagger, leader, post_factory, settings
    ):
        from flagdesk.services import FlagCreator, PenaltyTracker

        settings.SPAM_SCORE_TO_SILENCE_NEW_USER = 3.0
        settings.NUM_USERS_TO_SILENCE_NEW_USER = 2
        post = post_factory(new_user)

        FlagCreator.spam(leader, post)
        new_user.refresh_from_db()
        assert not new_user.is_silenced

        FlagCreator.spam(flagger, post)
        new_user.refresh_from_db()
        assert new_user.is_silenced
        assert new_user.silence_reason == "auto_silence_spam"
        assert PenaltyTracker().spam_score(new_user) == pytest.approx(8.0)
        assert PenaltyTracker().distinct_spam_flaggers(new_user) == 2

    def test_trusted_users_are_never_auto_silenced(self, test_user, leader, settings):
        from flagdesk.services import PenaltyTracker

        settings.SPAM_SCORE_TO_SILENCE_NEW_USER = 0.1
        settings.NUM_USERS_TO_SILENCE_NEW_USER = 1

        assert not PenaltyTracker().should_auto_silence(test_user)

    def test_lift_leaves_manual_silence(self, new_user):
        from flagdesk.models import SilenceReason
        from flagdesk.services import PenaltyTracker

        tracker = PenaltyTracker()
        tracker.silence(new_user, SilenceReason.MANUAL)

        assert tracker.lift_auto_silence(new_user) is False
        new_user.refresh_from_db()
        assert new_user.is_silenced


@pytest.mark.unit
class TestContentActuator:
    def test_delete_first_post_trashes_topic(self, post_factory, test_user, admin_user):
        from flagdesk.services import ContentActuator

        post = post_factory(test_user)
        ContentActuator().delete(post, admin_user)

        post.refresh_from_db()
        post.topic.refresh_from_db()
        assert post.deleted_at is not None
        assert post.deleted_by_id == admin_user.user_id
        assert post.topic.deleted_at is not None

    def test_delete_reply_keeps_topic(self, test_post, admin_user):
        from flagdesk.services import ContentActuator

        ContentActuator().delete(test_post, admin_user)

        test_post.topic.refresh_from_db()
        assert test_post.topic.deleted_at is None

    def test_is_protected(self, first_post, test_post):
        from flagdesk.services import ContentActuator

        actuator = ContentActuator()
        assert actuator.is_protected(first_post)
        assert not actuator.is_protected(test_post)

    def test_recover(self, post_factory, test_user, admin_user):
        from flagdesk.services import ContentActuator

        actuator = ContentActuator()
        post = post_factory(test_user)
        actuator.delete(post, admin_user)
        actuator.recover(post)

        post.refresh_from_db()
        post.topic.refresh_from_db()
        assert post.deleted_at is None
        assert post.topic.deleted_at is None

    def test_hide_unhide_and_reset(self, flagged_post):
        from flagdesk.services import ContentActuator

        actuator = ContentActuator()
        actuator.hide(flagged_post, reason="manual")
        assert flagged_post.hidden

        actuator.unhide(flagged_post)
        actuator.reset_flag_counts(flagged_post)

        flagged_post.refresh_from_db()
        assert not flagged_post.hidden
        assert flagged_post.hidden_reason is None
        assert flagged_post.spam_count == 0


@pytest.mark.unit
class TestSystemMessenger:
    def test_private_message(self, test_user):
        from flagdesk.models import User
        from flagdesk.services import SystemMessenger

        post = SystemMessenger().send_private_message(test_user, "flags_dispositions.agreed")

        assert post.topic.is_private_message
        assert post.author == User.objects.system_user()
        assert set(post.topic.allowed_users.all()) == {test_user, post.author}
        assert post.raw.startswith("Thanks for letting us know.")

    def test_uses_default_language_without_user_locale(self, test_user, settings):
        from flagdesk.services import SystemMessenger

        settings.ALLOW_USER_LOCALE = False
        test_user.preferred_language = "ja"

        assert SystemMessenger().language_for(test_user) == settings.LANGUAGE_CODE

    def test_uses_recipient_language_with_user_locale(self, test_user, settings):
        from flagdesk.services import SystemMessenger

        settings.ALLOW_USER_LOCALE = True
        test_user.preferred_language = "es"

        assert SystemMessenger().language_for(test_user) == "es"

    def test_interpolates_params(self, test_user):
        from flagdesk.services import SystemMessenger

        post = SystemMessenger().send_private_message(
            test_user,
            "flags_dispositions.post_deleted_owner",
            title_key="system_messages.post_deleted_title",
            topic_title="Cheap watches",
        )

        assert '"Cheap watches"' in post.raw
        assert post.topic.title == "Your post was removed"


@pytest.mark.unit
class TestFlagQuery:
    def test_limit(self, flagger, test_user, post_factory):
        from flagdesk.services import FlagCreator, FlagQuery

        for index in range(3):
            FlagCreator.spam(flagger, post_factory(test_user, title=f"Topic {index}"))

        assert len(FlagQuery(limit=2).flagged_posts()) == 2
        assert len(FlagQuery(limit="bogus").flagged_posts()) == 3

    def test_users_carry_flag_counters_without_extra_queries(
        self, flagger, leader, test_user, post_factory, django_assert_num_queries
    ):
        from flagdesk.serializers.flag_serializers import FlagUserSerializer
        from flagdesk.services import FlagCreator, FlagQuery

        for index, user in enumerate([flagger, leader]):
            FlagCreator.spam(user, post_factory(test_user, title=f"Topic {index}"))
        query = FlagQuery()
        query.flagged_posts()

        with django_assert_num_queries(0):
            data = FlagUserSerializer(query.users(), many=True).data

        assert len(data) == 3
        assert all(row["flags_agreed"] == 0 for row in data)

    def test_unknown_filter_falls_back_to_active(self):
        from flagdesk.services import FlagQuery

        assert FlagQuery(filter="everything").filter == "active"
