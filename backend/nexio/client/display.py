"""
Nexio Client — Display Helpers
===============================

Data-level decisions the app screens make, as plain functions.
"""

from typing import Any, Dict, Optional, Tuple

# (minimum score, level), highest first
REPUTATION_LEVELS = (
    (1000, "Master"),
    (500, "Expert"),
    (200, "Skilled"),
    (50, "Rising"),
    (0, "Beginner"),
)

NOTIFICATION_ICONS = {
    "follow": "user-plus",
    "upvote": "arrow-up",
    "comment": "message-circle",
    "mention": "at-sign",
    "level_up": "award",
}
DEFAULT_NOTIFICATION_ICON = "bell"


def reputation_level(score: int) -> str:
    for minimum, level in REPUTATION_LEVELS:
        if score >= minimum:
            return level
    return "Beginner"


def notification_icon(notification_type: str) -> str:
    return NOTIFICATION_ICONS.get(notification_type, DEFAULT_NOTIFICATION_ICON)


def notification_target(notification: Dict[str, Any]) -> Optional[Tuple[str, str]]:
    """
    Where tapping a notification leads.

    Returns ("post", postId) when the notification carries a post,
    ("profile", fromUserId) when it carries only a sender, else None.
    """
    if notification.get("postId"):
        return "post", notification["postId"]
    if notification.get("fromUserId"):
        return "profile", notification["fromUserId"]
    return None


def initial_route(onboarding_complete: bool, user: Optional[Dict[str, Any]]) -> str:
    """Onboarding until it is finished, then Login without a user, else Main."""
    if not onboarding_complete:
        return "Onboarding"
    if user is None:
        return "Login"
    return "Main"
