import logging

from fastapi import APIRouter, Depends

from cv_analyzer.api.deps import get_settings
from cv_analyzer.core.config import Settings
from cv_analyzer.integrations.email import send_contact_message
from cv_analyzer.schemas.analysis import ContactRequest, ContactResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/contact", response_model=ContactResponse)
def contact(payload: ContactRequest, settings: Settings = Depends(get_settings)):
    try:
        email_sent = send_contact_message(payload.model_dump(), settings)
    except Exception as exc:  # noqa: BLE001 - a mail outage must not fail the form
        logger.exception("Contact email failed: %s", exc)
        email_sent = False
    return ContactResponse(status="ok", email_sent=email_sent)
