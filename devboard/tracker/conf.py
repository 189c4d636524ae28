# ============================================
# tracker/conf.py
# ============================================
from django.conf import settings

DEFAULTS = {
    'POSITION_STEP': 1000,
    'ISSUE_KEY_MAX_RETRIES': 3,
    'POSITION_MAX_RETRIES': 3,
    'RETRY_BACKOFF_SECONDS': 0.05,
    'INVITATION_TTL_DAYS': 7,
    'LOCKOUT_MAX_ATTEMPTS': 5,
    'LOCKOUT_MINUTES': 15,
    'SEND_EMAIL': False,
    'FRONTEND_URL': 'http://localhost:3000',
    'REQUIRE_EMAIL_VERIFICATION': False,
}


def tracker_setting(name: str):
    """Read a knob from settings.TRACKER, falling back to DEFAULTS."""
    overrides = getattr(settings, 'TRACKER', None) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
