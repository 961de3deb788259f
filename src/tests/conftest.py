"""
pytest configuration and shared fixtures for flagdesk tests.
"""

import os
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))
os.environ.setdefault("DJANGO_ENV", "test")
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "configuration.settings")


@pytest.fixture(autouse=True)
def enable_db_access(db):
    """Enable database access for all tests."""


@pytest.fixture(autouse=True)
def clear_cache():
    """Token blacklist entries live in the cache; start every test clean."""
    from django.core.cache import cache

    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """API client for testing endpoints."""
    from rest_framework.test import APIClient

    return APIClient()


def _bearer_client(user):
    from rest_framework.test import APIClient
    from rest_framework_simplejwt.tokens import RefreshToken

    refresh = RefreshToken.for_user(user)
    refresh["user_id"] = user.user_id
    refresh["role"] = user.role

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return {"client": client, "user": user, "token": str(refresh.access_token)}


@pytest.fixture
def test_user():
    """A regular member (trust level 1)."""
    from flagdesk.models import User

    return User.objects.create_user(
        email="testuser@example.com",
        password="testpass123",
        username="testuser",
        full_name="Test User",
    )


@pytest.fixture
def flagger():
    """A second member who raises flags."""
    from flagdesk.models import TrustLevel, User

    return User.objects.create_user(
        email="flagger@example.com",
        password="testpass123",
        username="flagger",
        trust_level=TrustLevel.MEMBER,
    )


@pytest.fixture
def new_user():
    """A brand new user (trust level 0)."""
    from flagdesk.models import TrustLevel, User

    return User.objects.create_user(
        email="newbie@example.com",
        password="testpass123",
        username="newbie",
        trust_level=TrustLevel.NEW_USER,
    )


@pytest.fixture
def leader():
    """A trust level 4 member."""
    from flagdesk.models import TrustLevel, User

    return User.objects.create_user(
        email="leader@example.com",
        password="testpass123",
        username="leader",
        trust_level=TrustLevel.LEADER,
    )


@pytest.fixture
def admin_user():
    """An administrator."""
    from flagdesk.models import User

    return User.objects.create_superuser(
        email="admin@example.com",
        password="adminpass123",
        username="admin",
        full_name="Admin User",
    )


@pytest.fixture
def moderator():
    """A moderator without superuser rights."""
    from flagdesk.models import Role, User

    return User.objects.create_user(
        email="moderator@example.com",
        password="modpass123",
        username="moderator",
        role=Role.MODERATOR,
    )


@pytest.fixture
def admin_client(admin_user):
    """Authenticated API client with admin privileges."""
    return _bearer_client(admin_user)


@pytest.fixture
def user_client(test_user):
    """Authenticated API client for a non-staff member."""
    return _bearer_client(test_user)


@pytest.fixture
def category(admin_user):
    """A category whose definition topic has a first post."""
    from flagdesk.models import Category, Post, Topic

    topic = Topic.objects.create(title="About the General category", author=admin_user)
    Post.objects.create(topic=topic, author=admin_user, post_number=1, raw="General talk.")
    return Category.objects.create(name="General", slug="general", topic=topic)


def make_post(author, title="A topic about things", raw="Hello world", category=None):
    from flagdesk.models import Post, Topic

    topic = Topic.objects.create(title=title, author=author, category=category)
    return Post.objects.create(topic=topic, author=author, post_number=1, raw=raw)


@pytest.fixture
def post_factory():
    """Create a topic with a single first post and return the post."""
    return make_post


@pytest.fixture
def test_post(test_user, category):
    """A reply (post_number 2) written by test_user."""
    from flagdesk.models import Post

    topic_post = make_post(test_user, category=category)
    return Post.objects.create(
        topic=topic_post.topic,
        author=test_user,
        post_number=2,
        raw="This is a reply that somebody will flag.",
    )


@pytest.fixture
def first_post(category):
    """The first post of the category's definition topic."""
    return category.topic.posts.get(post_number=1)


@pytest.fixture
def flagged_post(test_post, flagger):
    """test_post with one pending spam flag from flagger."""
    from flagdesk.services import FlagCreator

    result = FlagCreator.spam(flagger, test_post)
    assert result.success
    return test_post
