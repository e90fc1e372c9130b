# file: assignments.py

import logging  # logging
from typing import List  # types

from databases import Database  # async db

import crud  # persistence
import errors  # taxonomy
import utils  # key/clock

logger = logging.getLogger("tapgas.assignments")

DUPLICATE_MESSAGE = "This cluster is already assigned to this driver."


async def assign_cluster(db: Database, driver_email: str, order_ids: List[str]) -> None:
    """Record a cluster assignment and hand its orders to the driver.

    The history insert and the order update share one transaction. A
    repeated (driver, order set) pair raises ConflictError and nothing is
    written. Ids without a matching order are kept in the record and simply
    update no row.
    """
    if not driver_email or not order_ids:
        raise errors.ValidationError("driver_email and order_ids[] required")
    order_key = utils.order_set_key(order_ids)
    async with db.transaction():
        if await crud.cluster_exists(db, driver_email, order_key):
            raise errors.ConflictError(DUPLICATE_MESSAGE)
        try:
            await crud.insert_cluster(db, driver_email, order_ids, order_key, utils.utcnow())
        except Exception as e:
            if errors.is_unique_violation(e):  # lost a race with an identical request
                raise errors.ConflictError(DUPLICATE_MESSAGE)
            raise
        await crud.assign_orders_to_driver(db, order_ids, driver_email)
    logger.info("assigned %d orders to %s", len(order_ids), driver_email)
