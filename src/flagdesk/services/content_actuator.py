# flagdesk/services/content_actuator.py
"""
Visibility side effects of moderation decisions.
"""

from django.db import transaction
from django.db.models import F

from flagdesk.exceptions import ProtectedContentError
from flagdesk.models import Category, Post
from flagdeskutils.logging import get_logger

logger = get_logger(__name__)


class ContentActuator:
    """
    Hide, delete and restore posts on behalf of the moderation engine.

    The first post of a category's definition topic is protected: it
    describes the category and can't be removed through flags.
    """

    def hide(self, post: Post, reason: str = "") -> Post:
        if not post.hidden:
            post.hide(reason)
            logger.info("post_hidden", post_id=post.post_id, reason=reason)
        return post

    def unhide(self, post: Post) -> Post:
        if post.hidden:
            post.unhide()
            logger.info("post_unhidden", post_id=post.post_id)
        return post

    def is_protected(self, post: Post) -> bool:
        if not post.is_first_post:
            return False
        return Category.objects.filter(topic_id=post.topic_id).exists()

    @transaction.atomic
    def delete(self, post: Post, actor) -> Post:
        """
        Soft-delete a post, and its topic when it is the first post.

        Raises:
            ProtectedContentError: the post defines a category
        """
        if self.is_protected(post):
            raise ProtectedContentError()

        post.trash(actor)
        if post.is_first_post:
            post.topic.trash(actor)

        logger.info(
            "post_deleted",
            post_id=post.post_id,
            topic_deleted=post.is_first_post,
            actor_id=getattr(actor, "user_id", None),
        )
        return post

    @transaction.atomic
    def recover(self, post: Post) -> Post:
        post.recover()
        if post.is_first_post and post.topic.deleted_at:
            post.topic.recover()
        logger.info("post_recovered", post_id=post.post_id)
        return post

    def reset_flag_counts(self, post: Post) -> Post:
        Post.objects.filter(pk=post.pk).update(
            **{field: 0 for field in Post.FLAG_COUNT_FIELDS}
        )
        post.refresh_from_db(fields=list(Post.FLAG_COUNT_FIELDS))
        return post

    def increment_flag_count(self, post: Post, counter_field: str) -> Post:
        Post.objects.filter(pk=post.pk).update(**{counter_field: F(counter_field) + 1})
        post.refresh_from_db(fields=[counter_field])
        return post
