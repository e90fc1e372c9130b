# file: crud.py

from typing import List, Optional  # types

from databases import Database  # async db
from sqlalchemy import select  # queries
from sqlalchemy.dialects import postgresql, sqlite  # upserts

from models import (  # tables
    Role, UserTable, LoginCodeTable, OrderTable, ClusterAssignmentTable, SessionTable,
)
from utils import row_to_dict  # Record -> dict

users = UserTable.__table__
login_codes = LoginCodeTable.__table__
orders = OrderTable.__table__
clusters = ClusterAssignmentTable.__table__
sessions = SessionTable.__table__


def _insert(db: Database, table):  # dialect insert with ON CONFLICT support
    if db.url.dialect.startswith("postgres"):
        return postgresql.insert(table)
    return sqlite.insert(table)


# -------------------- Users --------------------

async def get_user(db: Database, email: str) -> Optional[dict]:
    row = await db.fetch_one(users.select().where(users.c.email == email))
    return row_to_dict(row, users)


async def create_user_if_missing(db: Database, email: str) -> None:  # insert-or-ignore by email
    stmt = _insert(db, users).values(email=email, role=Role.customer.value)
    await db.execute(stmt.on_conflict_do_nothing(index_elements=[users.c.email]))


async def get_user_role(db: Database, email: str) -> Optional[Role]:  # role validated on read
    value = await db.fetch_val(select(users.c.role).where(users.c.email == email))
    if value is None:
        return None
    return Role(value)


async def update_user_profile(db: Database, email: str, name: str, phone_number: str) -> None:
    await db.execute(
        users.update().where(users.c.email == email).values(name=name, phone_number=phone_number)
    )


async def list_emails_by_role(db: Database, role: Role) -> List[str]:
    rows = await db.fetch_all(select(users.c.email).where(users.c.role == role.value).order_by(users.c.email))
    return [r["email"] for r in rows]


# -------------------- Login codes --------------------

async def upsert_login_code(db: Database, email: str, code: str, expires: int) -> None:  # one code per email
    stmt = _insert(db, login_codes).values(email=email, code=code, expires=expires)
    await db.execute(
        stmt.on_conflict_do_update(
            index_elements=[login_codes.c.email],
            set_={"code": stmt.excluded.code, "expires": stmt.excluded.expires},
        )
    )


async def get_login_code(db: Database, email: str) -> Optional[dict]:
    row = await db.fetch_one(login_codes.select().where(login_codes.c.email == email))
    return row_to_dict(row, login_codes)


# -------------------- Orders --------------------

async def order_id_exists(db: Database, order_id: str) -> bool:
    found = await db.fetch_val(select(orders.c.id).where(orders.c.order_id == order_id))
    return found is not None


async def insert_order(db: Database, values: dict) -> dict:
    await db.execute(orders.insert().values(**values))
    row = await db.fetch_one(orders.select().where(orders.c.order_id == values["order_id"]))
    return row_to_dict(row, orders)


def _newest_first():  # date desc, then insertion order
    return (orders.c.date.desc().nulls_last(), orders.c.id.desc())


async def latest_order_by_tracking_code(db: Database, email: str, unique_code: str) -> Optional[dict]:
    q = (
        orders.select()
        .where((orders.c.email == email) & (orders.c.unique_code == unique_code))
        .order_by(*_newest_first())
        .limit(1)
    )
    return row_to_dict(await db.fetch_one(q), orders)


async def list_orders_for_driver(db: Database, driver_email: str) -> List[dict]:
    q = orders.select().where(orders.c.driver_email == driver_email).order_by(*_newest_first())
    return [row_to_dict(r, orders) for r in await db.fetch_all(q)]


async def list_orders(db: Database) -> List[dict]:
    q = orders.select().order_by(*_newest_first())
    return [row_to_dict(r, orders) for r in await db.fetch_all(q)]


async def update_driver_order_status(
    db: Database, order_id: str, driver_email: str, status: str, failed_note: Optional[str]
) -> None:  # only the assigned driver's row matches
    await db.execute(
        orders.update()
        .where((orders.c.order_id == order_id) & (orders.c.driver_email == driver_email))
        .values(status=status, failed_note=failed_note)
    )


async def assign_orders_to_driver(db: Database, order_ids: List[str], driver_email: str) -> None:
    await db.execute(orders.update().where(orders.c.order_id.in_(order_ids)).values(driver_email=driver_email))


# -------------------- Cluster assignments --------------------

async def cluster_exists(db: Database, driver_email: str, order_key: str) -> bool:
    found = await db.fetch_val(
        select(clusters.c.id).where((clusters.c.driver_email == driver_email) & (clusters.c.order_key == order_key))
    )
    return found is not None


async def insert_cluster(db: Database, driver_email: str, order_ids: List[str], order_key: str, created_at) -> None:
    await db.execute(
        clusters.insert().values(
            driver_email=driver_email, order_ids=list(order_ids), order_key=order_key, created_at=created_at
        )
    )


# -------------------- Sessions --------------------

async def insert_session(db: Database, token_hash: str, email: str, role: Role, created_at: int, expires_at: int) -> None:
    await db.execute(
        sessions.insert().values(
            token_hash=token_hash, email=email, role=role.value, created_at=created_at, expires_at=expires_at
        )
    )


async def get_session(db: Database, token_hash: str) -> Optional[dict]:
    row = await db.fetch_one(sessions.select().where(sessions.c.token_hash == token_hash))
    return row_to_dict(row, sessions)


async def delete_session(db: Database, token_hash: str) -> None:
    await db.execute(sessions.delete().where(sessions.c.token_hash == token_hash))


async def delete_expired_sessions(db: Database, now: int) -> None:
    await db.execute(sessions.delete().where(sessions.c.expires_at < now))
