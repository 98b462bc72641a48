"""
Shared-secret check for the intake webhook.

Policy:
  - no INTAKE_SECRET configured   → every request passes
  - header present                → must match the secret
  - header missing                → passes unless INTAKE_SECRET_REQUIRED=true

The missing-header pass exists because the phone vendor cannot send custom
headers. With it on, anyone who knows the URL can create leads.
"""

import hmac

from leads_api.config import Settings

INTAKE_SECRET_HEADER = "x-intake-secret"


def is_intake_authorized(header_value: str | None, settings: Settings) -> bool:
    secret = settings.intake_secret
    if not secret:
        return True
    if header_value is None:
        return not settings.intake_secret_required
    return hmac.compare_digest(header_value.encode("utf-8"), secret.encode("utf-8"))


def describe_intake_policy(settings: Settings) -> str | None:
    """Warning text for permissive configurations, None when strict."""
    if not settings.intake_secret:
        return "INTAKE_SECRET is not set; the intake webhook accepts unauthenticated requests"
    if not settings.intake_secret_required:
        return (
            "Requests without an x-intake-secret header are accepted; "
            "set INTAKE_SECRET_REQUIRED=true to reject them"
        )
    return None
