# file: auth.py

import logging  # logging
from typing import Optional, Tuple  # types

from databases import Database  # async db

import config  # settings
import crud  # persistence
import notifier  # code delivery
import sessions  # session store
import utils  # code/clock
from errors import InvalidCredentialError, NotFoundError, ValidationError  # taxonomy
from models import Role  # roles
from sessions import SessionData  # identity

logger = logging.getLogger("tapgas.auth")

MINUTE_MS = 60 * 1000


async def send_code(db: Database, email: str) -> Optional[str]:
    """Issue (or replace) the login code for an email.

    Returns the code when it must go back in the response: mail delivery
    is not configured, or development mode is on. Returns None when the
    code went out by mail only.
    """
    if not email:
        raise ValidationError("Email required")
    code = utils.generate_code()
    expires = utils.now_ms() + config.LOGIN_CODE_TTL_MINUTES * MINUTE_MS
    await crud.upsert_login_code(db, email, code, expires)
    if not notifier.mail_configured():
        logger.info("mail not configured; returning login code for %s in the response", email)
        return code
    delivered = await notifier.send_login_code(email, code)
    if not delivered:
        logger.warning("login code for %s was not delivered", email)
    if config.LOGIN_CODE_IN_RESPONSE:  # development only
        return code
    return None


async def verify_code(db: Database, email: str, code: str) -> Tuple[dict, str]:  # -> (user, session token)
    if not email or not code:
        raise ValidationError("Email and code required")
    row = await crud.get_login_code(db, email)
    if not row:
        raise NotFoundError("No code found")
    if row["code"] != code or utils.now_ms() > int(row["expires"]):  # same answer for wrong and expired
        raise InvalidCredentialError("Invalid or expired code")

    await crud.create_user_if_missing(db, email)
    role = await crud.get_user_role(db, email) or Role.customer
    logger.info("login verified for %s as %s", email, role.value)
    token = await sessions.create_session(db, email, role)
    return {"email": email, "role": role.value}, token


async def update_profile(db: Database, session: SessionData, name: str, phone_number: str) -> None:
    if not name or not phone_number:
        raise ValidationError("Name and phone number required")
    if await crud.get_user(db, session.email) is None:
        raise NotFoundError("User not found")
    await crud.update_user_profile(db, session.email, name, phone_number)


def session_identity(session: SessionData) -> dict:
    return {"email": session.email, "role": session.role.value}
