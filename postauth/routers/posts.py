import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from postauth.database import get_db
from postauth.schemas.post import PostIn, PostOut
from postauth.services import post_service
from postauth.services.authz import get_current_claims
from postauth.services.sessions import SessionClaims
from postauth.utils.constants import MAX_PAGE

router = APIRouter(prefix="/api/posts", tags=["posts"])


@router.get("/all-posts")
def all_posts(db: Session = Depends(get_db), page: int | None = Query(None, le=MAX_PAGE)):
    posts = post_service.list_posts(db, page)
    return {"success": True, "message": "posts", "data": [PostOut.model_validate(p) for p in posts]}


@router.get("/single-post")
def single_post(post_id: uuid.UUID = Query(alias="_id"), db: Session = Depends(get_db)):
    post = post_service.get_post(db, post_id)
    return {"success": True, "message": "Single post", "data": PostOut.model_validate(post)}


@router.post("/create-post", status_code=201)
def create_post(
    payload: PostIn,
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    post = post_service.create_post(db, claims.account_id, payload.title, payload.description)
    return {"success": True, "message": "post created", "data": PostOut.model_validate(post)}


@router.put("/update-post")
def update_post(
    payload: PostIn,
    post_id: uuid.UUID = Query(alias="_id"),
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    post = post_service.update_post(db, claims.account_id, post_id, payload.title, payload.description)
    return {"success": True, "message": "post updated", "data": PostOut.model_validate(post)}


@router.delete("/delete-post")
def delete_post(
    post_id: uuid.UUID = Query(alias="_id"),
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    post_service.delete_post(db, claims.account_id, post_id)
    return {"success": True, "message": "post deleted"}
