"""Error tracking (Sentry)."""

from ticketmint.telemetry.sentry import init_sentry, is_sentry_enabled

__all__ = ["init_sentry", "is_sentry_enabled"]
