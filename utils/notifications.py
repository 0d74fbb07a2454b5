"""
Notifications Module - Telegram notification to the site owner
"""

import threading

import requests
from flask import current_app

TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/sendMessage"
PREVIEW_LENGTH = 200


def get_owner_telegram_credentials():
    """
    Get the owner's Telegram credentials from app config

    Returns:
        tuple: (bot_token, chat_id) or (None, None) if not configured
    """
    bot_token = current_app.config.get('OWNER_TELEGRAM_BOT_TOKEN')
    chat_id = current_app.config.get('OWNER_TELEGRAM_CHAT_ID')
    if not (bot_token and chat_id):
        return None, None
    return bot_token, chat_id


def format_contact_notification(contact):
    """Build the HTML Telegram message for a stored contact record"""
    body = contact.get('message', '')
    preview = body[:PREVIEW_LENGTH] + ('...' if len(body) > PREVIEW_LENGTH else '')
    return (
        f"📧 <b>New Portfolio Message</b>\n\n"
        f"👤 <b>From:</b> {contact.get('name')}\n"
        f"📧 <b>Email:</b> {contact.get('email')}\n"
        f"📌 <b>Subject:</b> {contact.get('subject')}\n"
        f"💬 <b>Message:</b>\n{preview}"
    )


def send_telegram_notification(message_text, bot_token, chat_id, logger):
    """
    Send a Telegram message

    Args:
        message_text (str): HTML message
        bot_token (str): Bot token
        chat_id (str): Target chat
        logger (logging.Logger): Logger to report the outcome to

    Returns:
        bool: True if sent successfully, False otherwise
    """
    try:
        url = TELEGRAM_API_URL.format(token=bot_token)
        payload = {
            'chat_id': chat_id,
            'text': message_text,
            'parse_mode': 'HTML'
        }
        response = requests.post(url, json=payload, timeout=10)
        if response.status_code == 200:
            logger.info("Owner Telegram notification sent")
            return True
        logger.error(f"Telegram API error: {response.status_code}")
        return False
    except requests.RequestException as e:
        logger.error(f"Telegram notification error: {str(e)}")
        return False


def notify_new_contact(contact, background=True):
    """
    Tell the site owner about a new contact message

    Does nothing when Telegram is not configured. Runs on a daemon thread by
    default so a slow Telegram API never delays the HTTP response.

    Returns:
        threading.Thread | bool | None: The sender thread, the send result
        when ``background`` is False, or None when not configured
    """
    bot_token, chat_id = get_owner_telegram_credentials()
    if not (bot_token and chat_id):
        current_app.logger.debug("Owner Telegram credentials not configured")
        return None

    message_text = format_contact_notification(contact)
    logger = current_app.logger
    if not background:
        return send_telegram_notification(message_text, bot_token, chat_id, logger)

    thread = threading.Thread(
        target=send_telegram_notification,
        args=(message_text, bot_token, chat_id, logger))
    thread.daemon = True
    thread.start()
    return thread


__all__ = [
    'get_owner_telegram_credentials',
    'format_contact_notification',
    'send_telegram_notification',
    'notify_new_contact',
]
