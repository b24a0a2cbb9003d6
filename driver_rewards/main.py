# driver_rewards/main.py

import logging
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# Config and core
from driver_rewards.core.config import settings as config
from driver_rewards.core.errors import RewardsError
from driver_rewards.core.logging_config import setup_logging
from driver_rewards.core.redis import redis_client
from driver_rewards.clients.ebay import ebay_client

# FastAPI routers
from driver_rewards.routers import (
    admin, application, auth, cart, catalog, contest, driver, order,
    organization, sponsor,
)

# --- Init ---
logger = logging.getLogger(__name__)


# --- Exception handlers ---
async def rewards_error_handler(request: Request, exc: RewardsError):
    """Domain errors become {"error", "reason"} with the error's own status code."""
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.reason}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def jsonable_errors(errors: list) -> list:
    # `ctx` may hold exception instances
    return [{key: value for key, value in error.items() if key != "ctx"} for error in errors]


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first.get('msg')}" if field else str(first.get("msg", "Invalid request"))
    return JSONResponse(
        status_code=422,
        content={"error": message, "reason": "validation_error", "detail": jsonable_errors(errors)},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Global handler for every unhandled exception.
    """
    logger.critical(f"Unhandled exception for request: {request.method} {request.url}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "reason": "internal_error"},
    )


# --- Lifespan ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Application lifespan startup...")

    yield

    await ebay_client.aclose()
    await redis_client.aclose()
    logger.info("Application shut down.")


# --- FastAPI app ---
app = FastAPI(
    title="Driver Rewards API",
    description="Points ledger, sponsor awards, catalog and checkout for the driver incentive program",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Exception handlers ---
app.add_exception_handler(RewardsError, rewards_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
api_router = APIRouter(prefix="/api")

api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(driver.router, tags=["Drivers"])
api_router.include_router(sponsor.router, prefix="/sponsor", tags=["Sponsors"])
api_router.include_router(organization.router, prefix="/organization", tags=["Organizations"])
api_router.include_router(application.router, prefix="/application", tags=["Applications"])
api_router.include_router(contest.router, prefix="/point-contest", tags=["Point Contests"])
api_router.include_router(cart.router, prefix="/cart", tags=["Cart"])
api_router.include_router(order.router, prefix="/orders", tags=["Orders"])
api_router.include_router(catalog.router, tags=["Catalog"])

app.include_router(api_router)
