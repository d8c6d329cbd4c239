import logging
from contextlib import contextmanager

from django.db import DatabaseError, transaction

from wards.exceptions import NotFound, PersistenceError

logger = logging.getLogger(__name__)


@contextmanager
def atomic_unit(operation):
    """Run a block as one transaction, surfacing database failures as PersistenceError."""
    try:
        with transaction.atomic():
            yield
    except DatabaseError as exc:
        logger.exception("%s failed in the database", operation)
        raise PersistenceError(f"{operation} could not be saved", {"cause": str(exc)}) from exc


def get_or_raise(queryset, pk, label):
    """Like get_object_or_404 but raising NotFound for the service layer."""
    model = getattr(queryset, "model", queryset)
    manager = queryset if hasattr(queryset, "model") else model._default_manager
    try:
        return manager.get(pk=pk)
    except (model.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"{label} {pk} does not exist", {"id": pk}) from None
