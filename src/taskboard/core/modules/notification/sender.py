"""Telegram copies of inbox notifications."""

import html

import structlog
from telegram import Bot
from telegram.constants import ParseMode
from telegram.error import TelegramError

from taskboard.core.modules.notification.models import Notification

logger = structlog.get_logger(__name__)


def render_telegram_text(notification: Notification, frontend_url: str) -> str:
    """Bold title, message, then an absolute link to the task if there is one (HTML parse mode)."""
    lines = [f"<b>{html.escape(notification.title)}</b>", html.escape(notification.message)]
    if notification.action_url:
        lines.append(f"{frontend_url.rstrip('/')}{notification.action_url}")
    return "\n".join(lines)


async def send_telegram_message(token: str, chat_id: str, text: str) -> tuple[bool, str | None]:
    """Send an HTML message. Returns (True, None), or (False, error message) if sending failed for any reason."""
    try:
        await Bot(token=token).send_message(chat_id=chat_id, text=text, parse_mode=ParseMode.HTML)
    except TelegramError as e:
        logger.warning("telegram_send_failed", chat_id=chat_id, error=str(e))
        return False, str(e)
    except Exception as e:
        logger.exception("telegram_send_error", chat_id=chat_id, error=str(e))
        return False, str(e)
    logger.debug("telegram_message_sent", chat_id=chat_id)
    return True, None
