#artmarket/api/routers/listings.py
from typing import List

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile as StarletteUploadFile

from artmarket.api.deps import get_image_client
from artmarket.data.database import get_db
from artmarket.domain.errors import MissingFieldsError, NotFoundError, UpstreamError
from artmarket.domain.schemas import ListingIn, ListingOut, ListingWithUserOut, MessageOut
from artmarket.services.image_client import ImageBlob, ImageHostClient
from artmarket.services.listing_service import ListingService
from artmarket.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["listings"])


def get_service(db: Session, image_client: ImageHostClient):
    return ListingService(db=db, image_client=image_client)


def _blob(upload) -> ImageBlob:
    return ImageBlob(
        filename=upload.filename or "image",
        content=upload.file.read(),
        content_type=upload.content_type or "application/octet-stream",
    )


def _parse(data: dict) -> ListingIn:
    try:
        return ListingIn.model_validate(data)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))


@router.post("/sell-art", response_model=ListingOut, status_code=201)
def create_listing(
    category: str | None = Form(None),
    title: str | None = Form(None),
    description: str | None = Form(None),
    price: str | None = Form(None),
    user_id: str | None = Form(None, alias="userId"),
    images: List[UploadFile] | None = File(None),
    db: Session = Depends(get_db),
    image_client: ImageHostClient = Depends(get_image_client),
):
    payload = _parse({
        "category": category,
        "title": title,
        "description": description,
        "price": price or None,
        "userId": user_id,
    })
    blobs = [_blob(f) for f in images or [] if f.filename]

    svc = get_service(db, image_client)
    try:
        return svc.create_listing(payload, blobs)
    except MissingFieldsError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except UpstreamError as e:
        logger.error(f"Error saving art: {e}")
        raise HTTPException(status_code=500, detail="Server error")


@router.put("/sell-art/{listing_id}", response_model=ListingOut)
async def update_listing(
    listing_id: str,
    request: Request,
    db: Session = Depends(get_db),
    image_client: ImageHostClient = Depends(get_image_client),
):
    """
    Przyjmuje multipart (z plikami) albo JSON.
    Bez plikow: URL-e z pola images, a jak ich nie ma - obecne obrazki.
    """
    content_type = request.headers.get("content-type", "")
    blobs: List[ImageBlob] = []

    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        data = {k: v for k, v in form.items() if not isinstance(v, StarletteUploadFile)}
        data["images"] = [v for v in form.getlist("images") if isinstance(v, str) and v] or None
        uploads = [v for v in form.getlist("images") if isinstance(v, StarletteUploadFile) and v.filename]
        blobs = [ImageBlob(u.filename, await u.read(), u.content_type or "application/octet-stream") for u in uploads]
    else:
        try:
            data = await request.json()
        except ValueError:
            raise HTTPException(status_code=422, detail="Invalid JSON body")
        if not isinstance(data, dict):
            raise HTTPException(status_code=422, detail="Invalid JSON body")

    if data.get("price") == "":
        data["price"] = None
    payload = _parse(data)

    svc = get_service(db, image_client)
    try:
        return await run_in_threadpool(svc.update_listing, listing_id, payload, blobs)
    except MissingFieldsError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UpstreamError as e:
        logger.error(f"Error updating art: {e}")
        raise HTTPException(status_code=500, detail="Server error")


@router.get("/art", response_model=List[ListingOut])
def list_listings(db: Session = Depends(get_db)):
    return ListingService(db=db, image_client=None).list_listings()


@router.get("/art/{listing_id}", response_model=ListingWithUserOut)
def get_listing(listing_id: str, db: Session = Depends(get_db)):
    svc = ListingService(db=db, image_client=None)
    try:
        return svc.get_listing(listing_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/user/{user_id}", response_model=List[ListingOut])
def list_user_listings(user_id: str, db: Session = Depends(get_db)):
    return ListingService(db=db, image_client=None).list_by_owner(user_id)


@router.delete("/art/{listing_id}", response_model=MessageOut)
def delete_listing(listing_id: str, db: Session = Depends(get_db)):
    svc = ListingService(db=db, image_client=None)
    try:
        svc.delete_listing(listing_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Art deleted"}
