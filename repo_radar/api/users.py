from fastapi import APIRouter, Depends, Response, status
from pymongo.database import Database

from repo_radar.database.mongo import get_db
from repo_radar.dtos import UserResponse, UserUpdate
from repo_radar.middleware.auth import ACCESS_TOKEN_COOKIE, get_current_user
from repo_radar.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
def get_me(user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    service = UserService(db)
    return service.get_me(str(user["_id"]))


@router.patch("/me", response_model=UserResponse)
def update_me(
    payload: UserUpdate,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    service = UserService(db)
    return service.update_me(str(user["_id"]), payload)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def delete_me(
    response: Response,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """Delete the account with its radars; the session ends with it."""
    service = UserService(db)
    service.delete_me(str(user["_id"]))
    response.delete_cookie(key=ACCESS_TOKEN_COOKIE, path="/")
