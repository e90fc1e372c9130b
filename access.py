# file: access.py

from typing import Optional  # types

from databases import Database  # async db
from fastapi import Depends, Request  # DI

import config  # settings
import sessions  # session store
from database import get_database  # persistence handle
from errors import ForbiddenError, UnauthenticatedError  # taxonomy
from models import Role  # roles
from sessions import SessionData  # identity


async def get_current_session(request: Request, db: Database = Depends(get_database)) -> Optional[SessionData]:
    token = request.cookies.get(config.SESSION_COOKIE_NAME)  # opaque cookie
    return await sessions.load_session(db, token)


async def require_session(session: Optional[SessionData] = Depends(get_current_session)) -> SessionData:  # any role
    if session is None:
        raise UnauthenticatedError("Not logged in")
    return session


def require_role(role: Role):  # dependency factory for one role
    async def guard(session: Optional[SessionData] = Depends(get_current_session)) -> SessionData:
        if session is None or session.role != role:
            raise ForbiddenError(f"Forbidden: {role.value.capitalize()}s only")
        return session
    guard.__name__ = f"require_{role.value}"
    return guard


require_driver = require_role(Role.driver)
require_admin = require_role(Role.admin)


def is_known_path(path: str) -> bool:  # catch-all rule
    return path.startswith(config.KNOWN_PREFIXES)
