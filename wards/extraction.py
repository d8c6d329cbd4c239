"""Pre-filling admissions from an uploaded document.

The extractor itself lives outside this project: `DOCUMENT_EXTRACTOR`
names a callable taking the uploaded file and returning a mapping of
whatever fields it could read.
"""
import logging

from django.conf import settings
from django.utils.module_loading import import_string

from .exceptions import ExtractionUnavailable
from .forms import AdmissionForm

logger = logging.getLogger(__name__)


def get_extractor():
    path = getattr(settings, "DOCUMENT_EXTRACTOR", "")
    if not path:
        raise ExtractionUnavailable("No document extractor is configured")
    try:
        return import_string(path)
    except ImportError as exc:
        raise ExtractionUnavailable(f"Document extractor {path!r} cannot be loaded") from exc


def extract_admission_data(document):
    """Return the admission form fields the extractor found; unknown keys are dropped."""
    extracted = get_extractor()(document) or {}
    fields = set(AdmissionForm._meta.fields)
    data = {key: value for key, value in extracted.items() if key in fields and value not in (None, "")}
    logger.info("Extracted %d admission fields from %s", len(data), getattr(document, "name", "document"))
    return data
