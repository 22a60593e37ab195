import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from database import Store, get_store
from intake import IntakeError, IntakeHandler
from logging_config import configure_logging
from notifier import Notifier, SmtpNotifier, get_notifier
from schemas import SubmissionKind, UserIn
from settings import Settings, get_settings
from submissions import SubmissionValidationError

logger = logging.getLogger("api")

settings = get_settings()

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    notifier = get_notifier()
    # Checked once here, never per request
    if isinstance(notifier, SmtpNotifier):
        await notifier.verify()
    logger.info("Environment: %s", settings.APP_ENV)
    yield

app = FastAPI(title="Storefront Intake API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)

def get_intake_handler(
    store: Store = Depends(get_store),
    notifier: Notifier = Depends(get_notifier),
    config: Settings = Depends(get_settings),
) -> IntakeHandler:
    return IntakeHandler(store, notifier, admin_email=config.ADMIN_EMAIL)

def rejected(exc: SubmissionValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": str(exc), "missing": exc.missing},
    )

# Errors

@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"message": "Endpoint not found"})
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})

@app.exception_handler(RequestValidationError)
async def unreadable_body(request: Request, exc: RequestValidationError):
    logger.error("Unreadable request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=500, content={"success": False, "message": "Something went wrong!"})

@app.exception_handler(Exception)
async def server_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Something went wrong!"})

# Submissions

@app.post("/api/contact", status_code=201)
async def submit_contact(
    payload: Optional[Dict[str, Any]] = Body(None),
    handler: IntakeHandler = Depends(get_intake_handler),
):
    try:
        outcome = await handler.handle(payload or {}, SubmissionKind.CONTACT)
    except SubmissionValidationError as exc:
        return rejected(exc)
    except IntakeError:
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "An error occurred while sending your message. Please try again.",
            },
        )
    response = {"success": True, "message": "Your message has been sent successfully!"}
    if outcome.warning:
        response["message"] = "Your message has been received, but there was a problem sending the email notification"
        response["warning"] = outcome.warning
    return response

@app.post("/api/orders", status_code=201)
async def submit_order(
    payload: Optional[Dict[str, Any]] = Body(None),
    handler: IntakeHandler = Depends(get_intake_handler),
):
    try:
        outcome = await handler.handle(payload or {}, SubmissionKind.ORDER)
    except SubmissionValidationError as exc:
        return rejected(exc)
    except IntakeError:
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "An error occurred while processing your request"},
        )
    response = {
        "success": True,
        "message": "Order submitted successfully",
        "order": outcome.order.model_dump(mode="json", by_alias=True),
    }
    if outcome.warning:
        response["warning"] = outcome.warning
    return response

@app.get("/api/orders")
async def list_orders(store: Store = Depends(get_store)):
    orders = await store.get_orders()
    return [o.model_dump(mode="json", by_alias=True) for o in orders]

# Collaborator endpoints

@app.get("/api/health")
async def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

@app.get("/api/users")
async def list_users(store: Store = Depends(get_store)):
    return await store.get_users()

@app.get("/api/users/{user_id}")
async def get_user(user_id: str, store: Store = Depends(get_store)):
    user = None
    if user_id.isdigit():
        user = await store.get_user(int(user_id))
    if user is None:
        return JSONResponse(status_code=404, content={"message": "User not found"})
    return user

@app.post("/api/users", status_code=201)
async def create_user(payload: Optional[UserIn] = Body(None), store: Store = Depends(get_store)):
    if payload is None or not payload.name or not payload.email:
        return JSONResponse(status_code=400, content={"message": "Name and email are required"})
    return await store.create_user(payload.name, payload.email)

if __name__ == "__main__":
    import uvicorn
    configure_logging(settings.LOG_LEVEL)
    logger.info("Server is running on http://%s:%s", settings.HOST, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
