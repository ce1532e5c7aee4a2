from fastapi import FastAPI, Depends, Header, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from contextlib import asynccontextmanager
from typing import Optional
import logging

from .config import settings
from .db import get_db, init_db
from .errors import AuthError, ServiceError
from .routes import health
from .schemas import (
    RegisterRequest,
    LoginRequest,
    UpdateProfileRequest,
    ChangePasswordRequest,
    LoginData,
    LoginResponse,
    UserResponse,
    MessageResponse,
)
from .service import AccountService
from .utils.log_setup import configure_logging

configure_logging(settings)
logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "The request could not be completed."


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Initialize database on startup"""
    init_db()
    yield


app = FastAPI(
    title="Account Service",
    description="User registration, login and bearer token sessions",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)


# ---------------- Error mapping ----------------

@app.exception_handler(ServiceError)
async def service_error_handler(_request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    message = str(exc) if settings.EXPOSE_ERROR_DETAILS else GENERIC_ERROR_MESSAGE
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_request: Request, exc: RequestValidationError):
    errors = {}
    for error in exc.errors():
        field = str(error["loc"][-1]) if error.get("loc") else "body"
        errors.setdefault(field, []).append(error["msg"])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "The given data was invalid.", "errors": errors},
    )


# ---------------- Dependencies ----------------

def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    return AccountService(db)


def get_bearer_token(
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> str:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise AuthError(AuthError.INVALID_TOKEN)
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise AuthError(AuthError.INVALID_TOKEN)
    return token


# ---------------- Public routes ----------------

@app.post("/register", response_model=UserResponse)
def register(payload: RegisterRequest, service: AccountService = Depends(get_account_service)):
    user = service.register(
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        password=payload.password,
    )
    return UserResponse(data=user, message="Your account created successfully.")


@app.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, service: AccountService = Depends(get_account_service)):
    user, token = service.login(email=payload.email, password=payload.password)
    return LoginResponse(
        data=LoginData(
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            token=token,
        ),
        message="Login successfully.",
    )


# ---------------- Protected routes ----------------

@app.get("/user/show", response_model=UserResponse, response_model_exclude_none=True)
def show(
    token: str = Depends(get_bearer_token),
    service: AccountService = Depends(get_account_service),
):
    return UserResponse(data=service.current_user(token))


@app.post("/user/update", response_model=UserResponse)
def update(
    payload: UpdateProfileRequest,
    token: str = Depends(get_bearer_token),
    service: AccountService = Depends(get_account_service),
):
    user = service.update_profile(token, first_name=payload.first_name, last_name=payload.last_name)
    return UserResponse(data=user, message="Your name has successfully changed.")


@app.post("/user/change_password", response_model=UserResponse)
def change_password(
    payload: ChangePasswordRequest,
    token: str = Depends(get_bearer_token),
    service: AccountService = Depends(get_account_service),
):
    user = service.change_password(
        token,
        old_password=payload.old_password,
        new_password=payload.new_password,
    )
    return UserResponse(data=user, message="Password has successfully changed.")


@app.post("/logout", response_model=MessageResponse)
def logout(
    token: str = Depends(get_bearer_token),
    service: AccountService = Depends(get_account_service),
):
    service.logout(token)
    return MessageResponse(message="User logged out.")
