# -*- coding: utf-8 -*-
"""
Self-service accounts on top of django.contrib.auth: registration with
email verification, and password reset.

Links carry ``uid`` (the base64 user pk) and a ``token`` from a
PasswordResetTokenGenerator, so nothing is stored for a pending reset and
tokens expire after settings.PASSWORD_RESET_TIMEOUT. A reset token dies
once the password changes; a verification token dies once the address
is verified.
"""
from __future__ import annotations
import logging
from typing import Optional

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.contrib.auth.tokens import PasswordResetTokenGenerator, default_token_generator
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.encoding import force_bytes, force_str
from django.utils.http import urlsafe_base64_decode, urlsafe_base64_encode

from tracker.conf import tracker_setting
from tracker.models import EmailVerification
from tracker.services import lockout
from tracker.utils.notify import frontend_url, send_email

log = logging.getLogger(__name__)

User = get_user_model()


class EmailVerificationTokenGenerator(PasswordResetTokenGenerator):
    key_salt = "tracker.services.account.EmailVerificationTokenGenerator"

    def _make_hash_value(self, user, timestamp):
        record = EmailVerification.objects.filter(user=user).first()
        verified_at = "" if record is None or record.verified_at is None else record.verified_at.isoformat()
        return f"{user.pk}{user.email}{verified_at}{timestamp}"


verification_token_generator = EmailVerificationTokenGenerator()


# ----- helpers -----

def encode_uid(user) -> str:
    return urlsafe_base64_encode(force_bytes(user.pk))


def _user_from_uid(uid: str):
    try:
        pk = force_str(urlsafe_base64_decode(uid))
        return User.objects.get(pk=pk)
    except (TypeError, ValueError, OverflowError, User.DoesNotExist):
        return None


def _link(path: str, user, token: str) -> str:
    return frontend_url(f"{path}?uid={encode_uid(user)}&token={token}")


def _split_name(full_name: str):
    first, _, last = (full_name or "").strip().partition(" ")
    return first, last.strip()


def is_email_verified(user) -> bool:
    """Accounts created outside registration (admin, createsuperuser) have no record and count as verified."""
    record = EmailVerification.objects.filter(user=user).first()
    return record is None or record.is_verified


def send_verification_email(user) -> bool:
    token = verification_token_generator.make_token(user)
    link = _link("/verify-email", user, token)
    return send_email(
        subject="Verify your email address",
        text_body=(
            f"Hi {user.username},\n\n"
            f"Confirm your DevBoard account by opening this link:\n{link}\n"
        ),
        to_emails=[user.email],
    )


# ----- registration -----

def register(*, username: str, email: str, password: str, full_name: str = "") -> User:
    """Create an active account and mail a verification link."""
    if User.objects.filter(username__iexact=username).exists():
        raise ValidationError("Username already exists")
    if User.objects.filter(email__iexact=email).exists():
        raise ValidationError("Email already exists")

    first_name, last_name = _split_name(full_name)
    validate_password(
        password,
        user=User(username=username, email=email, first_name=first_name, last_name=last_name),
    )

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=username,
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
            )
            EmailVerification.objects.create(user=user, email=email)
    except IntegrityError:
        # same username registered concurrently
        raise ValidationError("Username already exists")

    log.info("[account] user=%s registered", user.pk)
    send_verification_email(user)
    return user


def verify_email(*, uid: str, token: str) -> User:
    user = _user_from_uid(uid)
    if user is None:
        raise ValidationError("Invalid verification link")

    record = EmailVerification.objects.filter(user=user).first()
    if record is None or record.is_verified:
        return user
    if not verification_token_generator.check_token(user, token):
        raise ValidationError("Verification link is invalid or has expired")

    record.verified_at = timezone.now()
    record.email = user.email
    record.save(update_fields=["verified_at", "email"])
    log.info("[account] user=%s verified %s", user.pk, user.email)
    return user


def login_requires_verification(user) -> bool:
    return bool(tracker_setting("REQUIRE_EMAIL_VERIFICATION")) and not is_email_verified(user)


# ----- password reset -----

def request_password_reset(*, email: str) -> Optional[User]:
    """
    Mail a reset link to the active account with this address. Unknown
    addresses are only logged so the endpoint does not reveal who has an
    account.
    """
    user = User.objects.filter(email__iexact=email, is_active=True).order_by("id").first()
    if user is None:
        log.info("[account] password reset requested for unknown address")
        return None

    token = default_token_generator.make_token(user)
    link = _link("/reset-password", user, token)
    send_email(
        subject="Reset your password",
        text_body=(
            f"Hi {user.username},\n\n"
            f"Someone asked to reset your DevBoard password. Open this link to choose a new one:\n{link}\n\n"
            f"If it was not you, ignore this email."
        ),
        to_emails=[user.email],
    )
    log.info("[account] password reset link sent to user=%s", user.pk)
    return user


def reset_password(*, uid: str, token: str, new_password: str) -> User:
    user = _user_from_uid(uid)
    if user is None or not default_token_generator.check_token(user, token):
        raise ValidationError("Password reset link is invalid or has expired")

    validate_password(new_password, user=user)
    user.set_password(new_password)
    user.save(update_fields=["password"])
    lockout.clear(user)
    log.info("[account] user=%s reset password", user.pk)
    return user
