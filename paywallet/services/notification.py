"""
User and admin notifications
"""

import logging
from typing import Optional
from uuid import UUID

logger = logging.getLogger(__name__)


class Notifier:
    """Base notification interface"""

    async def send_transaction_notification(self, user_id: UUID, message: str) -> None:
        """Tell a wallet owner about a transaction"""
        raise NotImplementedError

    async def send_alert_to_admins(self, message: str) -> None:
        """Raise an operational alert (fraud verdicts, etc.)"""
        raise NotImplementedError


class LogNotifier(Notifier):
    """Writes notifications to the log; stands in for email/SMS delivery"""

    async def send_transaction_notification(self, user_id, message):
        logger.info(f"Notification to user {user_id}: {message}")

    async def send_alert_to_admins(self, message):
        logger.warning(f"Admin alert: {message}")


_notifier: Optional[Notifier] = None


def get_notifier() -> Notifier:
    global _notifier
    if _notifier is None:
        _notifier = LogNotifier()
    return _notifier


def set_notifier(notifier: Notifier) -> None:
    global _notifier
    _notifier = notifier


async def notify_user(notifier: Notifier, user_id: UUID, message: str) -> bool:
    """
    Send a user notification without letting delivery problems escape.

    Returns:
        True if the notifier accepted the message
    """
    try:
        await notifier.send_transaction_notification(user_id, message)
        return True
    except Exception as e:
        logger.error(f"Failed to notify user {user_id}: {e}")
        return False


async def alert_admins(notifier: Notifier, message: str) -> bool:
    """Same as notify_user, for admin alerts"""
    try:
        await notifier.send_alert_to_admins(message)
        return True
    except Exception as e:
        logger.error(f"Failed to send admin alert: {e}")
        return False
