import logging

from .models import AuditLog

logger = logging.getLogger(__name__)


def record(actor, action, target, details=""):
    """
    Write an AuditLog row for ``target`` (a model instance).

    The row joins the caller's transaction, so audit entries for a rolled
    back write disappear with it.
    """
    entry = AuditLog.objects.create(
        actor=actor if actor is not None and actor.is_authenticated else None,
        action=action,
        target_model=target.__class__.__name__,
        target_object_id=str(target.pk) if target.pk is not None else None,
        details=details,
    )
    logger.debug(f"audit {action} {entry.target_model}#{entry.target_object_id}: {details}")
    return entry
