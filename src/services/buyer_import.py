# -*- coding: utf-8 -*-
"""
Buyer Import Service

Bulk upsert of buyer rows already parsed and de-duplicated by the client.
Each row carries `isNew` or an `existingBuyerId`. Rows are committed one at a
time and a failing row never stops the batch.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List

from src.infra.db import db
from src.infra.log import get_logger
from src.config.buyers import AREA_IDS, BUYER_TYPE_IDS, SOURCE_CSV_IMPORT, DEFAULT_EMAIL_STATUS
from src.models.buyer import Buyer, normalize_email, normalize_areas
from src.services.metrics import record_import_row, record_buyer_created
from src.utils.errors import ValidationError

logger = get_logger('landivo.import')

# Fields a partial update may overwrite when the row provides them
UPDATABLE_FIELDS = {
    'firstName': 'first_name',
    'lastName': 'last_name',
    'buyerType': 'buyer_type',
    'preferredAreas': 'preferred_areas',
    'emailStatus': 'email_status',
    'emailPermissionStatus': 'email_permission_status',
}


@dataclass
class ImportResult:
    created: int = 0
    updated: int = 0
    failed: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)
    created_buyer_ids: List[str] = field(default_factory=list)
    updated_buyer_ids: List[str] = field(default_factory=list)

    def fail(self, row: Any, reason: str):
        self.failed += 1
        self.errors.append({'data': row, 'reason': reason})

    def to_dict(self) -> Dict[str, Any]:
        return {
            'created': self.created,
            'updated': self.updated,
            'failed': self.failed,
            'errors': self.errors,
            'createdBuyerIds': self.created_buyer_ids,
            'updatedBuyerIds': self.updated_buyer_ids,
        }


def _check_enumerations(row: Dict[str, Any]):
    buyer_type = row.get('buyerType')
    if buyer_type and buyer_type not in BUYER_TYPE_IDS:
        raise ValueError(f"Unknown buyer type: {buyer_type}")
    for area in row.get('preferredAreas') or []:
        if area not in AREA_IDS:
            raise ValueError(f"Unknown area: {area}")


def _create_from_row(row: Dict[str, Any], source: str) -> Buyer:
    buyer = Buyer(
        email=normalize_email(row['email']),
        phone=(row.get('phone') or '').strip() or None,
        buyer_type=row.get('buyerType') or None,
        first_name=row.get('firstName') or None,
        last_name=row.get('lastName') or None,
        source=source,
        preferred_areas=normalize_areas(row.get('preferredAreas')),
        email_status=row.get('emailStatus') or DEFAULT_EMAIL_STATUS,
        email_permission_status=row.get('emailPermissionStatus') or None,
    )
    db.session.add(buyer)
    db.session.commit()
    return buyer


def _update_from_row(buyer_id: str, row: Dict[str, Any], source: str) -> Buyer:
    """Overwrite only the fields the row provides; the rest stay as stored."""
    buyer = db.session.get(Buyer, buyer_id)
    if not buyer:
        raise LookupError(f"Buyer {buyer_id} not found")

    for key, attr in UPDATABLE_FIELDS.items():
        value = row.get(key)
        if value:
            if attr == 'preferred_areas':
                value = normalize_areas(value)
            setattr(buyer, attr, value)
    if source:
        buyer.source = source

    db.session.commit()
    return buyer


def import_buyers(rows: List[Dict[str, Any]], source: str = SOURCE_CSV_IMPORT) -> ImportResult:
    """
    Import a batch of buyer rows.

    Args:
        rows: parsed rows, each with `email` and either `isNew` or `existingBuyerId`
        source: provenance tag written on every created or updated buyer

    Returns:
        ImportResult with counts, ids and one error entry per failed row
    """
    if not rows or not isinstance(rows, list):
        raise ValidationError('No buyer data provided')

    source = source or SOURCE_CSV_IMPORT
    result = ImportResult()

    for row in rows:
        try:
            if not isinstance(row, dict):
                raise TypeError('Row must be an object')

            if not normalize_email(row.get('email')):
                result.fail(row, 'Missing required email field')
                record_import_row('failed')
                continue

            _check_enumerations(row)

            if row.get('isNew'):
                buyer = _create_from_row(row, source)
                result.created += 1
                result.created_buyer_ids.append(buyer.id)
                record_import_row('created')
                record_buyer_created(source)
            elif row.get('existingBuyerId'):
                buyer = _update_from_row(row['existingBuyerId'], row, source)
                result.updated += 1
                result.updated_buyer_ids.append(buyer.id)
                record_import_row('updated')
            else:
                record_import_row('skipped')
        except Exception as e:
            db.session.rollback()
            result.fail(row, str(e))
            record_import_row('failed')
            logger.log_best_effort_failure('buyer_import_row', str(e))

    logger.info(
        "Buyer import finished",
        rows=len(rows),
        created=result.created,
        updated=result.updated,
        failed=result.failed
    )
    return result
