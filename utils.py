# file: utils.py

import hashlib  # token hashes
import json  # order-set key
import secrets  # random
import time  # clock
from datetime import datetime, timezone  # utc

import config  # settings


def now_ms() -> int:  # epoch milliseconds
    return int(time.time() * 1000)


def utcnow() -> datetime:  # aware utc
    return datetime.now(timezone.utc)


def generate_code() -> str:  # 6-digit code, 100000..999999
    return str(100000 + secrets.randbelow(900000))


def generate_order_id() -> str:  # short public order id
    return secrets.token_hex(4)  # 8 hex chars


def create_session_token() -> str:  # opaque cookie value
    return secrets.token_urlsafe(32)


def hash_session_token(token: str) -> str:  # stored form of the cookie value
    return hashlib.sha256((token + config.SESSION_SECRET).encode("utf-8")).hexdigest()


def order_set_key(order_ids) -> str:  # canonical key of an order set
    return json.dumps(sorted(set(order_ids)), separators=(",", ":"))  # sorted json array


def row_to_dict(row, table) -> dict:  # databases Record -> dict of typed column values
    if row is None:
        return None
    return {c.name: row[c.name] for c in table.columns}
