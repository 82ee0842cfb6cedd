"""
users.py — User Account & Favorites Endpoints (API Layer)

Purpose:
- GET    /users/{username}                 → { user: {..., favoritedProperties} }
- PATCH  /users/{username}                 → { user }
- DELETE /users/{username}                 → { deleted: username }
- POST   /users/{username}/{property_zpid} → { favorited: property_zpid }
- DELETE /users/{username}/{property_zpid} → { unFavorited: property_zpid }

Every route requires the caller to be the user named in the path
(require_correct_user). Failures surface as ServiceError and are rendered
by the handlers registered in app/main.py.

This file should be thin — no SQL, no hashing. That lives in services/users.py.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Path

from app.api.deps import get_user_repository, require_correct_user
from app.api.v1.schemas import validate_user_update
from app.core.security import Identity
from app.services.users import MAX_ZPID, UserRepository

router = APIRouter(
    prefix="/users",
    tags=["users"]
)


@router.get("/{username}")
def get_user(
    username: str,
    _: Identity = Depends(require_correct_user),
    repo: UserRepository = Depends(get_user_repository),
):
    """
    GET /users/{username}

    Returns { id, username, firstName, lastName, email, favoritedProperties }
    where favoritedProperties is [ property_zpid, ... ].
    """
    user = repo.get(username).unwrap()
    return {"user": user}


@router.patch("/{username}")
def update_user(
    username: str,
    payload: Dict[str, Any] = Body(...),
    _: Identity = Depends(require_correct_user),
    repo: UserRepository = Depends(get_user_repository),
):
    """
    PATCH /users/{username}

    Body can include: { firstName, lastName, password, email }
    Returns { username, firstName, lastName, email }
    """
    data = validate_user_update(payload).unwrap()
    user = repo.update(username, data.changes()).unwrap()
    return {"user": user}


@router.delete("/{username}")
def delete_user(
    username: str,
    _: Identity = Depends(require_correct_user),
    repo: UserRepository = Depends(get_user_repository),
):
    """DELETE /users/{username} → { deleted: username }"""
    repo.remove(username).unwrap()
    return {"deleted": username}


@router.post("/{username}/{property_zpid}")
def favorite_property(
    username: str,
    property_zpid: int = Path(..., ge=0, le=MAX_ZPID),
    _: Identity = Depends(require_correct_user),
    repo: UserRepository = Depends(get_user_repository),
):
    """POST /users/{username}/{property_zpid} → { favorited: property_zpid }"""
    repo.favorite_property(username, property_zpid).unwrap()
    return {"favorited": property_zpid}


@router.delete("/{username}/{property_zpid}")
def unfavorite_property(
    username: str,
    property_zpid: int = Path(..., ge=0, le=MAX_ZPID),
    _: Identity = Depends(require_correct_user),
    repo: UserRepository = Depends(get_user_repository),
):
    """DELETE /users/{username}/{property_zpid} → { unFavorited: property_zpid }"""
    repo.unfavorite_property(username, property_zpid).unwrap()
    return {"unFavorited": property_zpid}
