# flagdesk/services/flag_query.py
"""
Flag listings for the admin flags index.
"""

from django.conf import settings
from django.db.models import Exists, OuterRef, Prefetch, Subquery

from flagdesk.models import Post, PostAction, Reviewable, ReviewableStatus, User


class FlagQuery:
    """
    Query flagged posts and the users involved with them.

    filter="active" lists posts with a pending reviewable; filter="old"
    lists posts whose reviewables are all resolved.
    """

    FILTERS = ("active", "old")

    def __init__(self, filter: str = "active", limit: int | None = None):
        self.filter = filter if filter in self.FILTERS else "active"
        default_limit = getattr(settings, "FLAGS_INDEX_LIMIT", 50)
        try:
            self.limit = max(1, int(limit)) if limit else default_limit
        except (TypeError, ValueError):
            self.limit = default_limit
        self._posts = None

    def _queryset(self):
        reviewables = Reviewable.objects.filter(target_post=OuterRef("pk"))
        posts = Post.objects.annotate(
            flagged=Exists(reviewables),
            has_pending=Exists(reviewables.pending()),
            last_flagged_at=Subquery(
                reviewables.order_by("-created_at").values("created_at")[:1]
            ),
        ).filter(flagged=True)

        if self.filter == "active":
            posts = posts.filter(has_pending=True)
        else:
            posts = posts.filter(has_pending=False)

        return (
            posts.select_related("author", "author__user_stat", "topic")
            .prefetch_related(
                Prefetch(
                    "post_actions",
                    queryset=PostAction.objects.select_related(
                        "user", "user__user_stat"
                    ).order_by("created_at"),
                ),
                Prefetch(
                    "reviewables",
                    queryset=Reviewable.objects.order_by("-created_at"),
                ),
            )
            .order_by("-last_flagged_at", "-post_id")
        )

    def flagged_posts(self) -> list[Post]:
        if self._posts is None:
            self._posts = list(self._queryset()[: self.limit])
        return self._posts

    def users(self) -> list[User]:
        """Authors and flaggers of the listed posts, each once."""
        users: dict[int, User] = {}
        for post in self.flagged_posts():
            users.setdefault(post.author_id, post.author)
            for post_action in post.post_actions.all():
                users.setdefault(post_action.user_id, post_action.user)
        return sorted(users.values(), key=lambda user: user.user_id)

    @staticmethod
    def latest_reviewable(post: Post) -> Reviewable | None:
        reviewables = list(post.reviewables.all())
        for reviewable in reviewables:
            if reviewable.status == ReviewableStatus.PENDING.value:
                return reviewable
        return reviewables[0] if reviewables else None
