"""
Integration tests for the admin flags API.

Covers listing, agree (keep/delete), disagree and defer, plus access control.
"""

import pytest


def flags_url(action=None, post_id=None):
    from django.urls import reverse

    if action is None:
        return reverse("flags_index")
    return reverse(f"flags_{action}", kwargs={"post_id": post_id})


@pytest.mark.integration
class TestFlagsAccess:
    def test_anonymous_is_unauthorized(self, api_client):
        response = api_client.get(flags_url())
        assert response.status_code == 401

    def test_non_staff_is_forbidden(self, user_client):
        response = user_client["client"].get(flags_url())
        assert response.status_code == 403
        assert "errors" in response.data

    def test_moderator_is_allowed(self, moderator, api_client):
        api_client.force_authenticate(user=moderator)
        response = api_client.get(flags_url())
        assert response.status_code == 200

    def test_json_suffix(self, admin_client):
        response = admin_client["client"].get("/admin/flags.json")
        assert response.status_code == 200
        assert response["Content-Type"].startswith("application/json")


@pytest.mark.integration
class TestFlagsIndex:
    def test_empty(self, admin_client):
        response = admin_client["client"].get(flags_url())

        assert response.status_code == 200
        assert response.data["users"] == []
        assert response.data["flagged_posts"] == []

    def test_lists_flagged_post_with_author_and_flagger(
        self, admin_client, flagged_post, flagger, test_user
    ):
        response = admin_client["client"].get(flags_url())

        assert response.status_code == 200
        assert len(response.data["users"]) == 2
        assert {u["id"] for u in response.data["users"]} == {
            test_user.user_id,
            flagger.user_id,
        }
        assert len(response.data["flagged_posts"]) == 1

        post = response.data["flagged_posts"][0]
        assert post["id"] == flagged_post.post_id
        assert post["reviewable_status"] == "pending"
        assert post["post_actions"][0]["post_action_type"] == "spam"

    def test_old_filter_lists_resolved_posts(self, admin_client, flagged_post):
        client = admin_client["client"]
        client.post(flags_url("defer", flagged_post.post_id))

        active = client.get(flags_url(), {"filter": "active"})
        old = client.get(flags_url(), {"filter": "old"})

        assert active.data["flagged_posts"] == []
        assert [p["id"] for p in old.data["flagged_posts"]] == [flagged_post.post_id]
        assert old.data["flagged_posts"][0]["reviewable_status"] == "ignored"


@pytest.mark.integration
class TestDeferFlag:
    def test_defer_then_agree_conflicts(self, admin_client, flagged_post):
        from flagdesk.models import Reviewable

        client = admin_client["client"]

        response = client.post(flags_url("defer", flagged_post.post_id))
        assert response.status_code == 200
        assert response.data["success"] == "OK"

        reviewable = Reviewable.objects.get(target_post=flagged_post)
        assert reviewable.status == "ignored"

        response = client.post(
            flags_url("agree", flagged_post.post_id), {"action_on_post": "keep"}
        )
        assert response.status_code == 409
        assert response.data["errors"][0] == "This flag has already been handled."

        reviewable.refresh_from_db()
        assert reviewable.status == "ignored"

    def test_defer_counts_ignored_flag(self, admin_client, flagged_post, flagger):
        admin_client["client"].post(flags_url("defer", flagged_post.post_id))

        flagger.refresh_from_db()
        assert flagger.user_stat.flags_ignored == 1

    def test_unflagged_post_is_not_found(self, admin_client, test_post):
        response = admin_client["client"].post(flags_url("defer", test_post.post_id))
        assert response.status_code == 404


@pytest.mark.integration
class TestAgreeFlag:
    def test_agree_and_keep(self, admin_client, admin_user, flagged_post, flagger):
        from flagdesk.models import Reviewable, ReviewableHistory

        response = admin_client["client"].post(
            flags_url("agree", flagged_post.post_id), {"action_on_post": "keep"}
        )
        assert response.status_code == 200

        reviewable = Reviewable.objects.get(target_post=flagged_post)
        assert reviewable.status == "approved"
        assert ReviewableHistory.objects.filter(
            reviewable=reviewable,
            created_by=admin_user,
            reviewable_history_type="transitioned",
            status="approved",
        ).exists()

        flagger.refresh_from_db()
        assert flagger.user_stat.flags_agreed == 1

        flagged_post.refresh_from_db()
        assert flagged_post.deleted_at is None

    def test_agree_and_delete_messages_flagger_in_their_language(
        self, admin_client, admin_user, flagged_post, flagger, settings
    ):
        from flagdesk.models import PostAction, TopicAllowedUser

        settings.ALLOW_USER_LOCALE = True
        admin_user.preferred_language = "ja"
        admin_user.save()

        response = admin_client["client"].post(
            flags_url("agree", flagged_post.post_id), {"action_on_post": "delete"}
        )
        assert response.status_code == 200

        post_action = PostAction.objects.get(post=flagged_post, user=flagger)
        assert post_action.agreed_by_id == admin_user.user_id

        flagger.refresh_from_db()
        assert flagger.user_stat.flags_agreed == 1

        membership = (
            TopicAllowedUser.objects.filter(user=flagger, topic__archetype="private_message")
            .order_by("id")
            .last()
        )
        message = membership.topic.posts.order_by("post_number").last()
        assert message.raw == (
            "Thanks for letting us know. We agree there's an issue and we've removed the post."
        )

        flagged_post.refresh_from_db()
        assert flagged_post.deleted_at is not None

    def test_agree_and_delete_messages_are_translated(
        self, admin_client, flagged_post, flagger, test_user, settings
    ):
        from flagdesk.models import Notification, TopicAllowedUser

        settings.ALLOW_USER_LOCALE = True
        flagger.preferred_language = "es"
        flagger.save()
        test_user.preferred_language = "ja"
        test_user.save()

        response = admin_client["client"].post(
            flags_url("agree", flagged_post.post_id), {"action_on_post": "delete"}
        )
        assert response.status_code == 200

        membership = (
            TopicAllowedUser.objects.filter(user=flagger, topic__archetype="private_message")
            .order_by("id")
            .last()
        )
        assert membership.topic.title == "Tu denuncia fue revisada"
        assert membership.topic.posts.get(post_number=1).raw == (
            "Gracias por avisarnos. Estamos de acuerdo en que hay un problema "
            "y hemos eliminado la publicación."
        )

        notification = Notification.objects.get(user=test_user)
        assert notification.title == "投稿が削除されました"
        assert notification.message == (
            "「A topic about things」でのあなたの投稿はコミュニティから通報され、"
            "モデレーターにより削除されました。"
        )

    def test_agree_and_delete_notifies_owner(self, admin_client, flagged_post, test_user):
        from flagdesk.models import Notification

        admin_client["client"].post(
            flags_url("agree", flagged_post.post_id), {"action_on_post": "delete"}
        )

        notification = Notification.objects.get(user=test_user)
        assert notification.type == "Moderation"
        assert test_user in notification.topic.allowed_users.all()

    def test_cannot_delete_category_definition_post(
        self, admin_client, first_post, flagger
    ):
        from flagdesk.services import FlagCreator

        assert FlagCreator.spam(flagger, first_post).success

        response = admin_client["client"].post(
            flags_url("agree", first_post.post_id), {"action_on_post": "delete"}
        )
        assert response.status_code == 403
        assert response.data["errors"]

        first_post.refresh_from_db()
        assert first_post.deleted_at is None
        assert first_post.reviewables.get().status == "pending"

    def test_unknown_action_on_post(self, admin_client, flagged_post):
        response = admin_client["client"].post(
            flags_url("agree", flagged_post.post_id), {"action_on_post": "explode"}
        )
        assert response.status_code == 400
        assert response.data["errors"] == [
            "action_on_post: \"explode\" is not a valid choice."
        ]

    def test_action_on_post_choices(self):
        from flagdesk.serializers.flag_serializers import AgreeFlagSerializer

        field = AgreeFlagSerializer().fields["action_on_post"]

        assert list(field.choices) == ["keep", "delete"]

    def test_action_on_post_defaults_to_keep(self, admin_client, flagged_post):
        response = admin_client["client"].post(flags_url("agree", flagged_post.post_id))

        assert response.status_code == 200
        assert response.data["reviewable"]["status"] == "approved"
        flagged_post.refresh_from_db()
        assert flagged_post.deleted_at is None


@pytest.mark.integration
class TestDisagreeFlag:
    def test_disagree_restores_post_and_unsilences_new_user(
        self, admin_client, new_user, leader, post_factory, settings
    ):
        from flagdesk.services import FlagCreator

        settings.SPAM_SCORE_TO_SILENCE_NEW_USER = 1.0
        settings.NUM_USERS_TO_SILENCE_NEW_USER = 1

        post = post_factory(new_user, raw="Buy cheap watches")
        assert FlagCreator.spam(leader, post).success

        new_user.refresh_from_db()
        post.refresh_from_db()
        assert new_user.is_silenced
        assert post.hidden

        response = admin_client["client"].post(flags_url("disagree", post.post_id))
        assert response.status_code == 200
        assert response.data["reviewable"]["status"] == "rejected"

        post.refresh_from_db()
        assert not post.hidden
        assert post.spam_count == 0

        new_user.refresh_from_db()
        assert not new_user.is_silenced

    def test_disagree_twice_conflicts(self, admin_client, flagged_post):
        client = admin_client["client"]

        assert client.post(flags_url("disagree", flagged_post.post_id)).status_code == 200
        response = client.post(flags_url("disagree", flagged_post.post_id))

        assert response.status_code == 409
        assert response.data["errors"] == ["This flag has already been handled."]
