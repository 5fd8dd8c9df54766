"""
Pairing order items with their lab records for the bulk lab form.

Items are matched to labs by item id first. Labs whose item link no longer
points at one of the order's items (the item was removed or replaced) are then
handed out by position, oldest lab first, to the items that found no id match.
A lab is never attached to more than one row.
"""
import logging

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError, NotFound

from millpanel.core.exceptions import Conflict
from .models import Lab

logger = logging.getLogger(__name__)

PLACEHOLDER_PREFIX = 'item_'

MATCHED_BY_ID = 'id'
MATCHED_BY_POSITION = 'position'


def is_placeholder_item_id(item_id) -> bool:
    """Unsaved order lines carry ids like item_0 until the order is saved"""
    return item_id is None or str(item_id).startswith(PLACEHOLDER_PREFIX)


def match_labs_to_items(items, labs):
    """
    Return [(item, lab or None, matched_by)] in item order.

    `items` are order items in display order, `labs` the order's live labs.
    """
    by_item = {}
    for lab in labs:
        if lab.order_item_id is not None and lab.order_item_id not in by_item:
            by_item[lab.order_item_id] = lab

    pairs = []
    used = set()
    for item in items:
        lab = by_item.get(item.pk)
        if lab is not None:
            used.add(lab.pk)
            pairs.append([item, lab, MATCHED_BY_ID])
        else:
            pairs.append([item, None, None])

    leftovers = sorted(
        (lab for lab in labs if lab.pk not in used),
        key=lambda lab: (lab.created_at, lab.pk),
    )
    remaining = iter(leftovers)
    for pair in pairs:
        if pair[1] is None:
            lab = next(remaining, None)
            if lab is None:
                break
            pair[1] = lab
            pair[2] = MATCHED_BY_POSITION

    return [tuple(pair) for pair in pairs]


def build_form_rows(items, labs, today=None):
    """One pre-filled form row per order item"""
    today = today or timezone.localdate()
    rows = []
    for index, (item, lab, matched_by) in enumerate(match_labs_to_items(items, labs)):
        if lab is not None:
            send_date = lab.lab_send_date or today
            approval_date = lab.approval_date or today
            sample_number = lab.sample_number
        else:
            send_date = approval_date = today
            sample_number = ''
        rows.append({
            'order_item': str(item.pk),
            'item_index': index,
            'quality_name': item.quality.name if item.quality_id else '',
            'lab': lab.pk if lab is not None else None,
            'matched_by': matched_by,
            'lab_send_date': send_date.isoformat(),
            'approval_date': approval_date.isoformat(),
            'sample_number': sample_number,
        })
    return rows


def validate_submission(rows):
    """Messages that block the whole batch; empty when the batch may be applied"""
    if not rows:
        return ['At least one lab row is required']
    if any(is_placeholder_item_id(row.get('order_item')) for row in rows):
        return ['Please save the order first before adding lab data.']
    errors = []
    for index, row in enumerate(rows, start=1):
        if not row.get('lab_send_date'):
            errors.append(f'Item {index}: Lab send date is required')
    return errors


def plan_submission(rows):
    """
    Split rows into (creates, updates, skipped).

    Rows with a lab are updates. Rows without one are creates, except that a
    second create for the same order item, or a second update of the same lab,
    is skipped.
    """
    creates, updates, skipped = [], [], []
    new_items = set()
    seen_labs = set()
    for row in rows:
        lab_id = row.get('lab')
        item_id = str(row['order_item'])
        if lab_id:
            if lab_id in seen_labs:
                skipped.append(row)
                continue
            seen_labs.add(lab_id)
            updates.append(row)
        elif item_id in new_items:
            skipped.append(row)
        else:
            new_items.add(item_id)
            creates.append(row)
    return creates, updates, skipped


def summary_message(created, updated, existing=0):
    if created and updated:
        return f'Successfully created {created} and updated {updated} lab records'
    if created:
        return f'Successfully created {created} lab records'
    if updated:
        return f'Successfully updated {updated} lab records'
    if existing:
        return 'Lab records already exist'
    return 'No changes made'


def apply_submission(order, rows):
    """
    Write a validated batch of lab rows for `order`.

    Updates are applied before creates so that a lab moving off an item frees
    it. Returns a dict with the created / updated Lab instances and counts.
    """
    errors = validate_submission(rows)
    if errors:
        raise ValidationError(errors)

    items = {str(item.pk): item for item in order.items.all()}
    for index, row in enumerate(rows, start=1):
        if str(row['order_item']) not in items:
            raise ValidationError(f'Item {index}: order item does not belong to this order')

    creates, updates, skipped = plan_submission(rows)
    live_labs = {lab.pk: lab for lab in order.labs.filter(soft_deleted=False)}
    created, updated, existing = [], [], []

    with transaction.atomic():
        moving = []
        for row in updates:
            lab = live_labs.get(row['lab'])
            if lab is None:
                raise NotFound(f"Lab {row['lab']} not found on this order")
            moving.append((lab, items[str(row['order_item'])], row))

        moving_ids = {lab.pk for lab, _, _ in moving}
        for lab, item, _ in moving:
            clash = (
                Lab.objects.filter(order_item=item, soft_deleted=False)
                .exclude(pk__in=moving_ids)
                .exists()
            )
            if clash:
                raise Conflict(f'Order item {item.pk} already has a lab record')

        # Detach first so that labs can trade items within one batch
        Lab.objects.filter(pk__in=moving_ids).update(order_item=None)
        for lab, item, row in moving:
            lab.order_item = item
            lab.lab_send_date = row['lab_send_date']
            lab.approval_date = row.get('approval_date')
            lab.sample_number = row.get('sample_number', '') or ''
            lab.save()
            updated.append(lab)

        for row in creates:
            item = items[str(row['order_item'])]
            if Lab.objects.filter(order_item=item, soft_deleted=False).exists():
                existing.append(item)
                continue
            sample_number = row.get('sample_number', '') or ''
            created.append(Lab.objects.create(
                order=order,
                order_item=item,
                lab_send_date=row['lab_send_date'],
                approval_date=row.get('approval_date'),
                sample_number=sample_number,
                lab_send_number=sample_number,
            ))

    logger.info(
        f"Lab batch for order {order.order_id}: {len(created)} created, {len(updated)} updated, "
        f"{len(existing)} already present, {len(skipped)} skipped"
    )
    return {
        'created': created,
        'updated': updated,
        'created_count': len(created),
        'updated_count': len(updated),
        'existing_count': len(existing),
        'skipped_count': len(skipped),
        'message': summary_message(len(created), len(updated), len(existing)),
    }


def sample_number_for(order, prefix, index):
    return f"{prefix}{order.order_id}-{index}"


def seed_labs_from_order(order, lab_send_date, prefix='LAB-', start_index=1, override_existing=False):
    """Create a lab for every item of the order with generated sample numbers"""
    items = list(order.items.all())
    if not items:
        raise ValidationError('Order has no items')

    live = {lab.order_item_id: lab for lab in order.labs.filter(soft_deleted=False, order_item__isnull=False)}
    processed, skipped = [], 0
    with transaction.atomic():
        for offset, item in enumerate(items):
            sample_number = sample_number_for(order, prefix, start_index + offset)
            lab = live.get(item.pk)
            if lab is not None and not override_existing:
                skipped += 1
                continue
            if lab is None:
                lab = Lab(order=order, order_item=item)
            lab.lab_send_date = lab_send_date
            lab.sample_number = sample_number
            lab.lab_send_number = sample_number
            lab.status = Lab.STATUS_SENT
            lab.save()
            processed.append(lab)
    return processed, skipped
