"""FastAPI web application for karen, the user-account service."""

import logging
import os
from contextlib import asynccontextmanager
from typing import Dict, Iterable, List, Optional, Tuple
from dotenv import load_dotenv
from fastapi import APIRouter, Depends, FastAPI, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from karen.api.user_models import AuthRequest, CreateUserRequest, UpdateUserRequest
from karen.auth.dependencies import get_session_user_id, get_user_repository, parse_user_id
from karen.database.database import init_db
from karen.database.user_repository import UserRepository
from karen.errors import KarenError, NotFoundError, ValidationError
from karen.models.user import AUTH_FIELDS, PUBLIC_FIELDS, SELF_FIELDS

load_dotenv()

logger = logging.getLogger(__name__)

API_PREFIX = os.getenv("KAREN_API_PREFIX", "/karen/v1").rstrip("/")
VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


# Initialize FastAPI app
app = FastAPI(
    title="karen API",
    description="User accounts: registration, credential checks, and profile management",
    version=VERSION,
    lifespan=lifespan,
)

router = APIRouter(prefix=f"{API_PREFIX}/users", tags=["users"])


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log path and method of every request."""
    logger.info(f"path: {request.url.path}, method: {request.method}")
    return await call_next(request)


@app.exception_handler(KarenError)
async def karen_error_handler(request: Request, exc: KarenError):
    if exc.status_code >= 500:
        logger.error(f"{exc.message} ({request.method} {request.url.path})")
    else:
        logger.info(f"{exc.status_code} {exc.message} ({request.method} {request.url.path})")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Report malformed bodies and parameters as 400 rather than FastAPI's 422."""
    errors = exc.errors()
    if any(error.get("type") == "json_invalid" for error in errors):
        message = "Failed to parse request body"
    else:
        message = "Request body is missing or has invalid field(s)"
    logger.info(f"400 {message} ({request.method} {request.url.path}): {errors}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": message})


def _select_fields(includes: Optional[List[str]], default: Tuple[str, ...]) -> Iterable[str]:
    """Resolve the `includes` query parameter to an ordered, de-duplicated field list.

    Raises:
        ValidationError: If a requested field is not public
    """
    if includes is None:
        return default
    fields: List[str] = []
    for field in includes:
        if field not in PUBLIC_FIELDS:
            raise ValidationError("Invalid includes format")
        if field not in fields:
            fields.append(field)
    return fields


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": VERSION}


@router.post("", status_code=status.HTTP_201_CREATED)
@router.post("/self", status_code=status.HTTP_201_CREATED)
def create_user(
    request: CreateUserRequest,
    response: Response,
    repo: UserRepository = Depends(get_user_repository),
) -> Dict:
    """Create a user. `POST /users/self` is accepted as an alias."""
    user = repo.create(
        name=request.name,
        email=request.email,
        password=request.password,
        avatar_url=request.avatar_url,
    )
    logger.info(f"Created user {user.id}")
    response.headers["Location"] = f"{router.prefix}/{user.id}"
    return user.public_view()


@router.post("/auth")
def authenticate_user(
    request: AuthRequest,
    repo: UserRepository = Depends(get_user_repository),
) -> Dict:
    """Verify an email/password pair."""
    user = repo.authenticate(request.email, request.password)
    return user.public_view(AUTH_FIELDS)


@router.get("/self")
def get_self(
    includes: Optional[List[str]] = Query(default=None),
    user_id: int = Depends(get_session_user_id),
    repo: UserRepository = Depends(get_user_repository),
) -> Dict:
    """Get the session user, optionally restricted to `includes` fields."""
    fields = _select_fields(includes, SELF_FIELDS)
    user = repo.get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user.public_view(fields)


@router.patch("/self")
def update_self(
    request: UpdateUserRequest,
    user_id: int = Depends(get_session_user_id),
    repo: UserRepository = Depends(get_user_repository),
) -> Dict:
    """Partially update the session user; echoes back the supplied fields."""
    changes = request.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError('Request body must have one of "email", "name", "password", or "avatar_url"')

    user = repo.update(user_id, changes)
    if user is None:
        raise NotFoundError("User not found")
    return {field: getattr(user, field) for field in changes if field != "password"}


@router.delete("/self", status_code=status.HTTP_204_NO_CONTENT)
def delete_self(
    user_id: int = Depends(get_session_user_id),
    repo: UserRepository = Depends(get_user_repository),
) -> Response:
    """Delete the session user."""
    if not repo.delete(user_id):
        raise NotFoundError("User not found")
    logger.info(f"Deleted user {user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}")
def get_user(
    user_id: str,
    includes: Optional[List[str]] = Query(default=None),
    repo: UserRepository = Depends(get_user_repository),
) -> Dict:
    """Get any user's public profile by id."""
    fields = _select_fields(includes, PUBLIC_FIELDS)
    parsed_id = parse_user_id(user_id)
    user = repo.get(parsed_id) if parsed_id is not None else None
    if user is None:
        raise NotFoundError("User not found")
    return user.public_view(fields)


@router.get("")
def get_user_by_email(
    email: Optional[str] = Query(default=None),
    includes: Optional[List[str]] = Query(default=None),
    repo: UserRepository = Depends(get_user_repository),
) -> Dict:
    """Look up a user by email."""
    if not email:
        raise ValidationError("Query parameter 'email' is required")
    fields = _select_fields(includes, PUBLIC_FIELDS)
    user = repo.get_by_email(email)
    if user is None:
        raise NotFoundError(f"User with email {email} was not found")
    return user.public_view(fields)


app.include_router(router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
