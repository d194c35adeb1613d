from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel

from voteboard.domain.suggestions import SuggestionStatus
from voteboard.routers.deps import get_store, require_admin, require_voter
from voteboard.services.errors import MissingFieldError, SuggestionNotFoundError
from voteboard.services.suggestion_service import SuggestionService
from voteboard.services.vote_service import VOTE_ADDED, VoteService

router = APIRouter(prefix="/api/suggestions", tags=["suggestions"])


class SuggestionCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    authorId: Optional[str] = None
    authorName: Optional[str] = None


class SuggestionUpdate(BaseModel):
    status: Optional[SuggestionStatus] = None
    title: Optional[str] = None
    description: Optional[str] = None


class VoteRequest(BaseModel):
    userId: Optional[str] = None
    voteValue: Optional[int] = None


def _suggestions(request: Request) -> SuggestionService:
    return SuggestionService(get_store(request))


@router.get("")
def list_suggestions(request: Request):
    return _suggestions(request).list()


@router.get("/{suggestion_id}")
def get_suggestion(suggestion_id: str, request: Request):
    suggestion = _suggestions(request).get(suggestion_id)
    if suggestion is None:
        raise HTTPException(404, "Suggestion not found")
    return suggestion


@router.get("/{suggestion_id}/votes")
def list_votes(suggestion_id: str, request: Request):
    return _suggestions(request).votes_for(suggestion_id)


@router.post("", status_code=201)
def create_suggestion(payload: SuggestionCreate, request: Request, user: dict = Depends(require_voter)):
    author_id = payload.authorId or (user or {}).get("discordId")
    author_name = payload.authorName or (user or {}).get("username")
    try:
        return _suggestions(request).create(
            payload.title,
            payload.description,
            author_id=author_id,
            author_name=author_name,
        )
    except MissingFieldError as exc:
        raise HTTPException(400, exc.message)


@router.patch("/{suggestion_id}")
def update_suggestion(
    suggestion_id: str,
    payload: SuggestionUpdate,
    request: Request,
    _user: dict = Depends(require_admin),
):
    # Explicit nulls would blank required fields; treat them as "not sent".
    changes = {k: v for k, v in payload.model_dump(exclude_unset=True, mode="json").items() if v is not None}
    try:
        return _suggestions(request).update(suggestion_id, changes)
    except SuggestionNotFoundError:
        raise HTTPException(404, "Suggestion not found")


@router.delete("/{suggestion_id}", status_code=204)
def delete_suggestion(suggestion_id: str, request: Request, _user: dict = Depends(require_admin)):
    try:
        _suggestions(request).delete(suggestion_id)
    except SuggestionNotFoundError:
        raise HTTPException(404, "Suggestion not found")
    return Response(status_code=204)


@router.put("/{suggestion_id}/vote")
def vote(suggestion_id: str, payload: VoteRequest, request: Request, user: dict = Depends(require_voter)):
    user_id = payload.userId or (user or {}).get("discordId")
    try:
        outcome = VoteService(get_store(request)).toggle_vote(suggestion_id, user_id, payload.voteValue)
    except MissingFieldError as exc:
        raise HTTPException(400, exc.message)
    return {"message": "Vote added" if outcome == VOTE_ADDED else "Vote removed"}
