# file: orders.py

import logging  # logging
from typing import List, Tuple  # types

from databases import Database  # async db

import crud  # persistence
import utils  # order id
from errors import InternalError, NotFoundError, ValidationError  # taxonomy
from models import Role  # roles
from schemas import OrderCreate, OrderStatusUpdate  # DTOs
from sessions import SessionData  # identity

logger = logging.getLogger("tapgas.orders")

ORDER_ID_ATTEMPTS = 5  # fresh ids tried before giving up


async def _new_order_id(db: Database) -> str:
    for _ in range(ORDER_ID_ATTEMPTS):
        candidate = utils.generate_order_id()
        if not await crud.order_id_exists(db, candidate):
            return candidate
    raise InternalError("Failed to allocate order id")


async def create_order(db: Database, session: SessionData, order: OrderCreate) -> dict:
    if not order.address or not order.cylinder_type or not order.payment:
        raise ValidationError("Missing required order details")
    order_id = await _new_order_id(db)
    values = {
        "order_id": order_id,
        "email": session.email,  # owner is always the session
        "customer_name": order.customer_name or None,
        "address": order.address,
        "location_lat": order.location.lat if order.location else None,
        "location_lng": order.location.lng if order.location else None,
        "cylinder_type": order.cylinder_type,
        "filled": order.filled,
        "unique_code": order.unique_code or None,
        "status": order.status or "pending",
        "date": order.date or None,
        "amount_paid": order.amount_paid,
        "notes": order.notes or None,
        "payment_method": order.payment,
        "service_type": order.service_type or None,
        "time_slot": order.time_slot or None,
        "delivery_window": order.delivery_window or None,
        "driver_email": None,
        "failed_note": None,
    }
    created = await crud.insert_order(db, values)
    logger.info("order %s created by %s", order_id, session.email)
    return created


async def check_order(db: Database, email: str, unique_code: str) -> dict:  # public lookup by tracking code
    if not email or not unique_code:
        raise ValidationError("Email and uniqueCode required")
    found = await crud.latest_order_by_tracking_code(db, email, unique_code)
    if not found:
        raise NotFoundError("Order not found")
    return found


async def list_orders_for_driver(db: Database, session: SessionData) -> List[dict]:
    return await crud.list_orders_for_driver(db, session.email)


async def list_all_orders(db: Database) -> Tuple[List[dict], List[str]]:  # -> (orders, driver emails)
    all_orders = await crud.list_orders(db)
    drivers = await crud.list_emails_by_role(db, Role.driver)
    return all_orders, drivers


async def batch_update(db: Database, session: SessionData, updates: List[OrderStatusUpdate]) -> None:
    """Apply driver status updates.

    Items without an order id or status are skipped. The update predicate
    includes the driver's email, so rows assigned to someone else are left
    untouched without any error.
    """
    attempted = 0
    for update in updates:
        if not update.order_id or not update.status:
            continue
        await crud.update_driver_order_status(
            db, update.order_id, session.email, update.status, update.failed_note or None
        )
        attempted += 1
    logger.info("driver %s submitted %d/%d order updates", session.email, attempted, len(updates))
