"""Business-logic / service functions for the territories app."""
from __future__ import annotations

import logging

from django.db import transaction

from territories.models import Territory, TerritoryAssignment

logger = logging.getLogger("territory")


@transaction.atomic
def assign_territories(sales_rep, territory_ids) -> list[TerritoryAssignment]:
    """Assign ``sales_rep`` to every territory in ``territory_ids``.

    Already existing assignments are kept as is, so calling twice is harmless.
    Returns the assignments that were created by this call.
    """
    if not sales_rep.is_sales:
        raise ValueError("Seuls les representants peuvent etre affectes a un territoire.")

    territories = list(Territory.objects.filter(pk__in=territory_ids))
    if len(territories) != len(set(map(str, territory_ids))):
        raise ValueError("Un ou plusieurs territoires sont introuvables.")

    created = []
    for territory in territories:
        assignment, was_created = TerritoryAssignment.objects.get_or_create(
            sales_rep=sales_rep,
            territory=territory,
        )
        if was_created:
            created.append(assignment)

    logger.info(
        "Rep %s assigned to %d new territories (%d requested)",
        sales_rep.pk, len(created), len(territories),
    )
    return created


def unassign_territory(sales_rep, territory_id) -> bool:
    """Remove one assignment; returns False when there was nothing to remove."""
    deleted, _ = TerritoryAssignment.objects.filter(
        sales_rep=sales_rep,
        territory_id=territory_id,
    ).delete()
    if deleted:
        logger.info("Rep %s unassigned from territory %s", sales_rep.pk, territory_id)
    return bool(deleted)
