# file: sessions.py
"""Server-side session store.

The browser only holds an opaque random token in an httpOnly cookie. The
store keeps a salted sha256 of that token together with the identity, so a
leaked table cannot be replayed as cookies.
"""

import logging  # logging
from dataclasses import dataclass  # value type
from typing import Optional  # types

from databases import Database  # async db
from fastapi import Response  # cookie writer

import config  # settings
import crud  # persistence
import utils  # tokens/clock
from models import Role  # role enum

logger = logging.getLogger("tapgas.sessions")

DAY_MS = 24 * 60 * 60 * 1000


@dataclass(frozen=True)
class SessionData:  # resolved identity of a request
    email: str
    role: Role
    expires_at: int  # epoch ms


def max_age_seconds() -> int:
    return config.SESSION_MAX_AGE_DAYS * 24 * 60 * 60


async def create_session(db: Database, email: str, role: Role) -> str:  # returns cookie token
    token = utils.create_session_token()
    now = utils.now_ms()
    expires_at = now + config.SESSION_MAX_AGE_DAYS * DAY_MS
    await crud.insert_session(db, utils.hash_session_token(token), email, role, now, expires_at)
    logger.info("session created for %s (%s)", email, role.value)
    return token


async def load_session(db: Database, token: Optional[str]) -> Optional[SessionData]:  # None when absent/expired
    if not token:
        return None
    token_hash = utils.hash_session_token(token)
    row = await crud.get_session(db, token_hash)
    if not row:
        return None
    if utils.now_ms() > int(row["expires_at"]):  # natural expiry
        await crud.delete_session(db, token_hash)
        return None
    try:
        role = Role(row["role"])
    except ValueError:
        logger.error("session for %s carries unknown role %r", row["email"], row["role"])
        return None
    return SessionData(email=row["email"], role=role, expires_at=int(row["expires_at"]))


async def prune_expired(db: Database) -> None:  # startup housekeeping
    await crud.delete_expired_sessions(db, utils.now_ms())


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=token,
        max_age=max_age_seconds(),
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite=config.SESSION_COOKIE_SAMESITE,
        path="/",
    )
