"""Worker settings."""
import os

from leadflow_core.outreach import SmtpConfig, TwilioConfig


def _env_bool(name: str, default: bool) -> bool:
    v = os.environ.get(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "on")


def get_smtp_config() -> SmtpConfig:
    """Get SMTP relay settings from environment."""
    return SmtpConfig(
        host=os.environ.get("SMTP_HOST", ""),
        port=int(os.environ.get("SMTP_PORT", "587")),
        user=os.environ.get("SMTP_USER", ""),
        password=os.environ.get("SMTP_PASSWORD", ""),
        from_address=os.environ.get("SMTP_FROM", ""),
        sender_name=os.environ.get("SMTP_SENDER_NAME", "Real Estate Team"),
        use_tls=_env_bool("SMTP_USE_TLS", True),
    )


def get_twilio_config() -> TwilioConfig:
    """Get Twilio settings from environment."""
    return TwilioConfig(
        account_sid=os.environ.get("TWILIO_ACCOUNT_SID", ""),
        auth_token=os.environ.get("TWILIO_AUTH_TOKEN", ""),
        from_number=os.environ.get("TWILIO_PHONE_NUMBER", ""),
        messaging_service_sid=os.environ.get("TWILIO_MESSAGING_SERVICE_SID", ""),
        status_callback_url=os.environ.get("TWILIO_STATUS_CALLBACK_URL", ""),
    )
