"""Timbri di audit applicati dai repository su add/update."""

from roster.models.common import AuditMixin, is_blank, utc_now


def stamp_created(entity: AuditMixin) -> AuditMixin:
    """created_at lo decide sempre lo store. created_by deve arrivare dal chiamante."""
    if is_blank(entity.created_by):
        raise ValueError("CreatedBy must be set before the entity is persisted.")
    entity.created_at = utc_now()
    return entity


def apply_update_audit(existing: AuditMixin, incoming: AuditMixin) -> AuditMixin:
    """
    Copia updated_at/updated_by dall'entita' aggiornata su quella salvata.
    created_at/created_by della riga salvata non vengono mai toccati.
    """
    if incoming.updated_at is None or is_blank(incoming.updated_by):
        raise ValueError("Entity must be marked with update_last_modified before it is persisted.")
    existing.updated_at = incoming.updated_at
    existing.updated_by = incoming.updated_by
    return existing
