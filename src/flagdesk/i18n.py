# flagdesk/i18n.py
"""
Translation keys for moderation messages.

Keys are stable identifiers used by services and tests; the English
text is the gettext msgid, translated through the catalogs under
flagdesk/locale/.
"""

from django.utils.translation import gettext, gettext_lazy, gettext_noop as _

MESSAGES = {
    "flags.errors.already_handled": _("This flag has already been handled."),
    "flags.errors.not_found": _("There is no flag to review for this post."),
    "flags.errors.protected_content": _(
        "You cannot delete the first post of a category's description topic."
    ),
    "flags.errors.invalid_action_on_post": _(
        "action_on_post must be one of: %(choices)s."
    ),
    "flags.errors.invalid_decision": _("decision must be one of: %(choices)s."),
    "flags.errors.cannot_flag_own_post": _("You cannot flag your own post."),
    "flags.errors.post_deleted": _("This post has been deleted."),
    "flags.errors.already_flagged": _("You have already flagged this post."),
    "flags_dispositions.agreed": _(
        "Thanks for letting us know. We agree there's an issue and we're looking into it."
    ),
    "flags_dispositions.agreed_and_deleted": _(
        "Thanks for letting us know. We agree there's an issue and we've removed the post."
    ),
    "flags_dispositions.disagreed": _(
        "Thanks for letting us know. We're looking into it."
    ),
    "flags_dispositions.ignored": _(
        "Thanks for letting us know. We're looking into it."
    ),
    "flags_dispositions.post_deleted_owner": _(
        "Your post in \"%(topic_title)s\" was flagged by the community and removed by a moderator."
    ),
    "system_messages.flags_disposition_title": _("Your flag was reviewed"),
    "system_messages.post_deleted_title": _("Your post was removed"),
}


def t(key: str, **params) -> str:
    """Translate a message key in the currently active language."""
    text = gettext(MESSAGES[key])
    return text % params if params else text


def lazy(key: str):
    """Return the lazily translated message for a key."""
    return gettext_lazy(MESSAGES[key])
