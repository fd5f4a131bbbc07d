"""Contact models."""
from datetime import datetime

from pydantic import BaseModel, Field

from leadflow_core.util.time import utc_now


class Contact(BaseModel):
    """A CRM contact, keyed by email address."""

    id: int | None = None
    first_name: str
    last_name: str
    email: str
    phone_number: str | None = None
    company_name: str | None = None
    job_title: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    client_type: str | None = None
    client_status: str | None = None
    lead_source: str | None = None
    notes: str | None = None
    is_active: bool = True
    email_opted_in: bool = False
    sms_opted_in: bool = False
    email_contact_count: int = 0
    sms_contact_count: int = 0
    total_contact_count: int = 0
    last_contact_date: datetime | None = None
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class ContactFilters(BaseModel):
    """Optional equality filters used to select campaign recipients."""

    client_type: str | None = None
    client_status: str | None = None
    lead_source: str | None = None
    city: str | None = None
    state: str | None = None

    def active(self) -> dict[str, str]:
        """Filters that were actually set."""
        return {k: v for k, v in self.model_dump().items() if v}
