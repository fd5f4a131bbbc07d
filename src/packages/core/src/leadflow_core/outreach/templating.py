"""Per-contact message personalization."""
import re

from leadflow_core.contacts.models import Contact

PLACEHOLDER = re.compile(r"\{(\w+)\}")


def contact_fields(contact: Contact) -> dict[str, str]:
    return {
        "first_name": contact.first_name,
        "last_name": contact.last_name,
        "full_name": contact.full_name,
        "email": contact.email,
        "company_name": contact.company_name or "",
        "city": contact.city or "",
        "state": contact.state or "",
    }


def personalize(template: str, contact: Contact) -> str:
    """Fill {first_name}-style placeholders; unknown ones render empty."""
    fields = contact_fields(contact)
    return PLACEHOLDER.sub(lambda m: fields.get(m.group(1), ""), template)
