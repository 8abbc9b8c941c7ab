"""User CRUD routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Request, Response
from fastapi.responses import JSONResponse

from userdb.errors import NotFoundError
from userdb.models import Envelope, HealthResponse, InsertResult, User, UserBase
from userdb.store import UserRepository

from user_service.pipeline import (
    get_deadline,
    get_repository,
    respond,
    within_deadline,
)

router = APIRouter()


@router.get("/")
def hello():
    return {"message": "Hello, World!"}


@router.get("/health", response_model=HealthResponse)
async def health(request: Request, response: Response):
    if await request.app.state.connector.ping():
        return HealthResponse(status="ok", service="user-service")
    response.status_code = 503
    return HealthResponse(status="unavailable", service="user-service")


@router.post("/user", status_code=201)
async def create_user(
    payload: UserBase,
    repo: UserRepository = Depends(get_repository),
    deadline: float = Depends(get_deadline),
) -> JSONResponse:
    user_id = await within_deadline(repo.insert(payload), deadline)
    return respond(Envelope[InsertResult].success(201, InsertResult(inserted_id=user_id)))


@router.get("/user/{userId}")
async def get_user(
    user_id: str = Path(alias="userId"),
    repo: UserRepository = Depends(get_repository),
    deadline: float = Depends(get_deadline),
) -> JSONResponse:
    user = await within_deadline(repo.get(user_id), deadline)
    # unknown ids answer with the zero-value record, not 404
    return respond(Envelope[User].success(200, user or User()))


@router.put("/user/{userId}")
async def edit_user(
    payload: UserBase,
    user_id: str = Path(alias="userId"),
    repo: UserRepository = Depends(get_repository),
    deadline: float = Depends(get_deadline),
) -> JSONResponse:
    user = await within_deadline(repo.update(user_id, payload), deadline)
    return respond(Envelope[User].success(200, user or User()))


@router.delete("/user/{userId}")
async def delete_user(
    user_id: str = Path(alias="userId"),
    repo: UserRepository = Depends(get_repository),
    deadline: float = Depends(get_deadline),
) -> JSONResponse:
    deleted = await within_deadline(repo.delete(user_id), deadline)
    if deleted < 1:
        raise NotFoundError()
    return respond(Envelope[str].success(200, "User successfully deleted!"))


@router.get("/users")
async def list_users(
    repo: UserRepository = Depends(get_repository),
    deadline: float = Depends(get_deadline),
) -> JSONResponse:
    users = await within_deadline(repo.list_all(), deadline)
    return respond(Envelope[list[User]].success(200, users))
