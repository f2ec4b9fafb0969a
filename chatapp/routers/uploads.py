"""Upload endpoints backed by DigitalOcean Spaces."""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status
from sqlalchemy.orm import Session

from ..constants import STORAGE_BUCKETS
from ..database import get_session
from ..schemas import MediaUploadResponse
from ..services import (
    ActorContext,
    SpacesConfigurationError,
    SpacesDeletionError,
    SpacesUploadError,
    delete_file_from_spaces,
    get_actor_context,
    set_avatar_url,
    upload_file_to_spaces,
)
from ..services.spaces_service import AVATAR_BUCKET

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post("/{bucket}", response_model=MediaUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_endpoint(
    bucket: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_session),
    context: ActorContext = Depends(get_actor_context),
) -> MediaUploadResponse:
    """Upload to Spaces under ``<bucket>/<account id>/`` and return a public URL.

    Uploading to the avatars bucket also points the profile at the new picture.
    Storage failures surface as 502 so clients can tell them apart from bad input.
    """

    if bucket not in STORAGE_BUCKETS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown storage bucket")
    filename = (file.filename or "").strip()
    if not filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file must include a filename.")

    account_id = context.effective_actor.account_id
    try:
        result = await upload_file_to_spaces(file, bucket=bucket, account_id=account_id)
    except SpacesConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    except SpacesUploadError as exc:  # pragma: no cover - network bound
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    if bucket == AVATAR_BUCKET:
        set_avatar_url(db, profile_id=context.actor_id, avatar_url=result.url)

    return MediaUploadResponse(
        url=result.url,
        key=result.key,
        bucket=result.bucket,
        content_type=result.content_type,
    )


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_upload_endpoint(
    key: str = Query(..., min_length=1),
    context: ActorContext = Depends(get_actor_context),
) -> Response:
    try:
        delete_file_from_spaces(key, account_id=context.effective_actor.account_id)
    except SpacesConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    except SpacesDeletionError as exc:  # pragma: no cover - network bound
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
