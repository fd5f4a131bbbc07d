"""Outbound email and SMS transports."""
from leadflow_core.outreach.mailer import (
    OutgoingEmail,
    SmtpConfig,
    SmtpMailer,
    is_valid_email,
)
from leadflow_core.outreach.sms import (
    OutgoingSms,
    TwilioConfig,
    TwilioSmsGateway,
    is_valid_phone_number,
)
from leadflow_core.outreach.templating import personalize

__all__ = [
    "OutgoingEmail",
    "SmtpConfig",
    "SmtpMailer",
    "is_valid_email",
    "OutgoingSms",
    "TwilioConfig",
    "TwilioSmsGateway",
    "is_valid_phone_number",
    "personalize",
]
