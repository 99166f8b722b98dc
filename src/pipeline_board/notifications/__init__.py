"""Notification feed for the board's badge."""

from pipeline_board.notifications.poller import NotificationFeed, NotificationPoller

__all__ = ["NotificationFeed", "NotificationPoller"]
