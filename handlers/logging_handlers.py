"""
logging_handlers.py — Functional handlers that log inbound traffic.

Usage in gateway.yaml:
    message_handlers:
      - handlers.logging_handlers.log_incoming
    status_handlers:
      - handlers.logging_handlers.log_status
"""

import logging

from smsgateway.data import IncomingMessage, MessageStatus

logger = logging.getLogger("handlers.logging")


async def log_incoming(message: IncomingMessage) -> None:
    logger.info(f"[{message.provider}] SMS from {message.src}: {message.body}")


async def log_status(status: MessageStatus) -> None:
    if status.error:
        logger.warning(f"[{status.provider}] #{status.msgid} {status.status.value}: {status.error}")
    else:
        state = "delivered" if status.delivered else "pending"
        logger.info(f"[{status.provider}] #{status.msgid} {status.status.value} ({state})")
