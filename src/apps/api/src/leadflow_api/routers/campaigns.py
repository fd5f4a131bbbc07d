"""Email and SMS campaign endpoints."""
import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from leadflow_api.deps import get_mailer, get_registry, get_sms_gateway
from leadflow_core.contacts import ContactFilters
from leadflow_core.jobs import BatchPolicy, JobDefinition, JobRegistry
from leadflow_core.outreach import SmtpMailer, TwilioSmsGateway
from leadflow_core.util import JobDispatchError
from leadflow_worker.tasks import build_email_campaign, build_sms_campaign

router = APIRouter(prefix="/campaigns", tags=["campaigns"])
logger = structlog.get_logger()


class EmailCampaignCreate(BaseModel):
    """Request to start an email campaign."""

    subject: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    filters: ContactFilters = Field(default_factory=ContactFilters)


class SmsCampaignCreate(BaseModel):
    """Request to start an SMS campaign."""

    body: str = Field(..., min_length=1, max_length=1600)
    filters: ContactFilters = Field(default_factory=ContactFilters)


def _send_policy(request: Request) -> BatchPolicy:
    settings = request.app.state.settings
    return BatchPolicy(
        size=settings.send_batch_size, delay_seconds=settings.send_batch_delay_seconds
    )


def _submit(registry: JobRegistry, definition: JobDefinition) -> dict:
    try:
        job_id = registry.submit(definition)
    except JobDispatchError as e:
        logger.warning("campaign_dispatch_refused", kind=definition.kind.value, error=str(e))
        raise HTTPException(status_code=503, detail=str(e)) from e
    return {"job_id": job_id}


@router.post("/email")
def create_email_campaign(
    body: EmailCampaignCreate,
    request: Request,
    registry: JobRegistry = Depends(get_registry),
    mailer: SmtpMailer = Depends(get_mailer),
):
    """Start sending an email campaign to opted-in contacts."""
    definition = build_email_campaign(
        body.subject, body.body, body.filters, mailer=mailer, policy=_send_policy(request)
    )
    return _submit(registry, definition)


@router.post("/sms")
def create_sms_campaign(
    body: SmsCampaignCreate,
    request: Request,
    registry: JobRegistry = Depends(get_registry),
    gateway: TwilioSmsGateway = Depends(get_sms_gateway),
):
    """Start sending an SMS campaign to opted-in contacts."""
    definition = build_sms_campaign(
        body.body, body.filters, gateway=gateway, policy=_send_policy(request)
    )
    return _submit(registry, definition)
