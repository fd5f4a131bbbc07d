"""Request dependencies."""
from fastapi import Request

from leadflow_core.jobs import JobRegistry
from leadflow_core.outreach import SmtpMailer, TwilioSmsGateway
from leadflow_worker.settings import get_smtp_config, get_twilio_config


def get_registry(request: Request) -> JobRegistry:
    """The registry owned by the running app."""
    return request.app.state.registry


def get_mailer() -> SmtpMailer:
    return SmtpMailer(get_smtp_config())


def get_sms_gateway() -> TwilioSmsGateway:
    return TwilioSmsGateway(get_twilio_config())
