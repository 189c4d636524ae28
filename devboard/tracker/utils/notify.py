# -*- coding: utf-8 -*-
from __future__ import annotations
import logging
from typing import Iterable, Optional

from django.conf import settings
from django.core.mail import EmailMultiAlternatives

from tracker.conf import tracker_setting

logger = logging.getLogger(__name__)


def _mk_subject(subject: str) -> str:
    prefix = getattr(settings, "EMAIL_SUBJECT_PREFIX", "")
    return f"{prefix}{subject}" if prefix else subject


def frontend_url(path: str = "") -> str:
    base = (tracker_setting("FRONTEND_URL") or "").rstrip("/")
    if not path:
        return base
    return f"{base}/{path.lstrip('/')}"


def send_email(
    *,
    subject: str,
    text_body: str,
    to_emails: Iterable[str],
    html_body: Optional[str] = None,
) -> bool:
    """
    Send one email through the configured Django backend.
    Returns True/False; delivery errors are logged, never raised.
    """
    if not tracker_setting("SEND_EMAIL"):
        logger.debug("[notify.email] SEND_EMAIL disabled; skip '%s'.", subject)
        return False

    tos = [e for e in (to_emails or []) if e]
    if not tos:
        logger.warning("[notify.email] No recipients; skip.")
        return False

    from_email = getattr(settings, "DEFAULT_FROM_EMAIL", None) or getattr(settings, "SERVER_EMAIL", None)
    if not from_email:
        logger.warning("[notify.email] DEFAULT_FROM_EMAIL / SERVER_EMAIL not set; skip.")
        return False

    try:
        msg = EmailMultiAlternatives(
            subject=_mk_subject(subject),
            body=text_body,
            from_email=from_email,
            to=tos,
        )
        if html_body:
            msg.attach_alternative(html_body, "text/html")
        msg.send(fail_silently=False)
    except Exception as ex:
        logger.warning("[notify.email] send failed to %s: %s", ",".join(tos), ex)
        return False

    logger.info("[notify.email] sent '%s' to %s", subject, ",".join(tos))
    return True
