# FILE: main.py  # TapGas API server

import logging  # logging
import os  # env
from contextlib import asynccontextmanager  # lifespan
from typing import Optional  # types

from databases import Database  # async db
from fastapi import Depends, FastAPI, Request, Response  # FastAPI
from fastapi.exceptions import RequestValidationError  # body errors
from fastapi.middleware.cors import CORSMiddleware  # CORS
from fastapi.responses import JSONResponse, PlainTextResponse  # responses
from starlette.exceptions import HTTPException as StarletteHTTPException  # base http errors

import access  # guards
import assignments  # assignment service
import auth  # auth service
import config  # settings
import orders  # order service
import schemas  # DTOs
import sessions  # session store
from database import create_tables, database, get_database  # persistence
from errors import ValidationError, internal_errors  # taxonomy
from sessions import SessionData  # identity

# -------------------- Logger --------------------
logger = logging.getLogger("tapgas")  # parent logger
if not logger.handlers:  # once per process
    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter("[TAPGAS] %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(h)
logger.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))

api_logger = logging.getLogger("tapgas.api")  # endpoint failures
request_logger = logging.getLogger("tapgas.requests")  # access log


# -------------------- Startup / Shutdown --------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables()  # sync DDL
    await database.connect()  # async pool
    await sessions.prune_expired(database)  # drop dead sessions
    logger.info("TapGas API ready")
    yield
    await database.disconnect()


app = FastAPI(title="TapGas API", lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)


# -------------------- Error handlers --------------------

def error_response(status_code: int, message: str) -> JSONResponse:  # single error shape
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        if loc:
            fields.append(".".join(loc))
    message = ValidationError.message
    if fields:
        message = f"{message}: {', '.join(sorted(set(fields)))}"
    return error_response(ValidationError.status_code, message)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    api_logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, "Internal server error")


# -------------------- Middleware --------------------

@app.middleware("http")
async def known_routes_only(request: Request, call_next):  # catch-all 404 + access log
    path = request.url.path
    if not access.is_known_path(path):
        return PlainTextResponse("Not found", status_code=404)
    if path.startswith(config.LOGGED_PREFIXES):
        request_logger.info("%s %s", request.method, path)
    return await call_next(request)


app.add_middleware(  # outermost: preflight never hits the route guard
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,  # session cookie
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------------------- Auth --------------------

@app.post("/auth/send-code")
async def send_code(body: schemas.SendCodeRequest, db: Database = Depends(get_database)):
    with internal_errors("Failed to send code", api_logger):
        code = await auth.send_code(db, body.email)
    data = {"success": True}
    if code:  # no mail delivery, or development mode
        data["code"] = code
    return data


@app.post("/auth/verify-code")
async def verify_code(body: schemas.VerifyCodeRequest, response: Response, db: Database = Depends(get_database)):
    with internal_errors("Failed to verify code", api_logger):
        user, token = await auth.verify_code(db, body.email, body.code)
    sessions.set_session_cookie(response, token)
    return {"success": True, "user": user}


@app.get("/auth/session")
async def current_session(session: SessionData = Depends(access.require_session)):
    return {"success": True, "user": auth.session_identity(session)}


@app.post("/profile")
async def update_profile(
    body: schemas.ProfileUpdate,
    session: SessionData = Depends(access.require_session),
    db: Database = Depends(get_database),
):
    with internal_errors("Failed to update profile", api_logger):
        await auth.update_profile(db, session, body.name, body.phone_number)
    return {"success": True}


# -------------------- Orders --------------------

@app.post("/order")
async def create_order(
    order: schemas.OrderCreate,
    session: SessionData = Depends(access.require_session),
    db: Database = Depends(get_database),
):
    with internal_errors("Failed to create order", api_logger):
        created = await orders.create_order(db, session, order)
    return {"success": True, "order": created}


@app.post("/order/check")
async def check_order(body: schemas.OrderCheckRequest, db: Database = Depends(get_database)):
    with internal_errors("Failed to check order", api_logger):
        found = await orders.check_order(db, body.email, body.unique_code)
    return {"success": True, "order": found}


@app.get("/orders")
async def list_all_orders(
    session: SessionData = Depends(access.require_admin),
    db: Database = Depends(get_database),
):
    with internal_errors("Failed to fetch orders or drivers", api_logger):
        all_orders, drivers = await orders.list_all_orders(db)
    return {"success": True, "orders": all_orders, "drivers": drivers}


# -------------------- Driver --------------------

@app.get("/driver/orders")
async def driver_orders(
    session: SessionData = Depends(access.require_driver),
    db: Database = Depends(get_database),
):
    with internal_errors("Failed to fetch driver orders", api_logger):
        items = await orders.list_orders_for_driver(db, session)
    return {"success": True, "orders": items}


@app.post("/driver/update-orders")
async def driver_update_orders(
    body: schemas.BatchUpdateRequest,
    session: SessionData = Depends(access.require_driver),
    db: Database = Depends(get_database),
):
    with internal_errors("Failed to update orders", api_logger):
        await orders.batch_update(db, session, body.updates)
    return {"success": True}


# -------------------- Admin --------------------

@app.post("/assign-cluster")
async def assign_cluster(
    body: schemas.AssignClusterRequest,
    session: SessionData = Depends(access.require_admin),
    db: Database = Depends(get_database),
):
    with internal_errors("Failed to assign cluster", api_logger):
        await assignments.assign_cluster(db, body.driver_email, body.order_ids)
    return {"success": True}


def run(host: Optional[str] = None, port: Optional[int] = None):  # console entry point
    import uvicorn

    uvicorn.run(
        app,
        host=host or os.getenv("HOST", "0.0.0.0"),
        port=port or int(os.getenv("PORT", "4000")),
    )


if __name__ == "__main__":
    run()
