# artmarket/services/listing_service.py
from typing import List

from sqlalchemy.orm import Session

from artmarket.data.models.listing import ListingModel
from artmarket.domain.errors import MissingFieldsError, NotFoundError
from artmarket.domain.schemas import ListingIn, ListingOut, ListingWithUserOut
from artmarket.repos.listing_repo import ListingRepo
from artmarket.repos.user_repo import UserRepo
from artmarket.services.image_client import ImageBlob, ImageHostClient
from artmarket.services.user_service import to_user_out
from artmarket.utils.sanitize import is_blank
from artmarket.utils.settings import UPLOAD_FOLDER
from artmarket.utils.logging import get_logger

logger = get_logger(__name__)

TEXT_FIELDS = ("category", "title", "description")


def to_listing_out(listing: ListingModel) -> ListingOut:
    return ListingOut(
        id=listing.id,
        category=listing.category,
        title=listing.title,
        description=listing.description,
        price=listing.price,
        images=list(listing.images or []),
        user_id=listing.user_id,
    )


def _missing_fields(payload: ListingIn) -> List[str]:
    missing = [f for f in TEXT_FIELDS if is_blank(getattr(payload, f))]
    if payload.price is None or payload.price <= 0:
        missing.append("price")
    return missing


class ListingService:
    """
    Ogloszenia (SellArt): create / update / read / delete.
    Obrazki ida przez ImageHostClient zanim cokolwiek zapiszemy w bazie.
    """

    def __init__(self, db: Session, image_client: ImageHostClient, folder: str = UPLOAD_FOLDER):
        self.repo = ListingRepo(db)
        self.users = UserRepo(db)
        self.image_client = image_client
        self.folder = folder

    #commands
    def create_listing(self, payload: ListingIn, blobs: List[ImageBlob]) -> ListingOut:
        missing = _missing_fields(payload)
        if is_blank(payload.user_id):
            missing.append("userId")
        if not blobs:
            missing.append("images")
        if missing:
            raise MissingFieldsError(missing)

        # najpierw upload, blad uploadu = nic nie zapisujemy
        urls = self.image_client.upload_many(blobs, self.folder)

        created = self.repo.create_listing(
            ListingModel(
                category=payload.category,
                title=payload.title,
                description=payload.description,
                price=payload.price,
                images=urls,
                user_id=payload.user_id,
            )
        )
        logger.info(f"Listing {created.id} created by {created.user_id} with {len(urls)} images")
        return to_listing_out(created)

    def update_listing(
        self,
        listing_id: str,
        payload: ListingIn,
        blobs: List[ImageBlob] | None = None,
    ) -> ListingOut:
        missing = _missing_fields(payload)
        if missing:
            raise MissingFieldsError(missing)

        listing = self.repo.get_listing(listing_id)
        if not listing:
            raise NotFoundError("Art not found")

        # pliki > URL-e od klienta > obecne obrazki
        if blobs:
            images = self.image_client.upload_many(blobs, self.folder)
        elif payload.images:
            images = list(payload.images)
        else:
            images = list(listing.images or [])

        updated = self.repo.replace_listing(
            listing,
            {
                "category": payload.category,
                "title": payload.title,
                "description": payload.description,
                "price": payload.price,
                "images": images,
            },
        )
        logger.info(f"Listing {listing_id} updated")
        return to_listing_out(updated)

    def delete_listing(self, listing_id: str) -> None:
        listing = self.repo.get_listing(listing_id)
        if not listing:
            raise NotFoundError("Art not found")
        self.repo.delete_listing(listing)
        logger.info(f"Listing {listing_id} deleted")

    #queries
    def get_listing(self, listing_id: str) -> ListingWithUserOut:
        listing = self.repo.get_listing(listing_id)
        if not listing:
            raise NotFoundError("Art not found")

        owner = self.users.get_by_user_id(listing.user_id)
        if not owner:
            logger.warning(f"Listing {listing_id} points to missing user {listing.user_id}")
            raise NotFoundError("User not found")

        return ListingWithUserOut(
            **to_listing_out(listing).model_dump(),
            user=to_user_out(owner),
        )

    def list_listings(self) -> List[ListingOut]:
        return [to_listing_out(listing) for listing in self.repo.list_all()]

    def list_by_owner(self, user_id: str) -> List[ListingOut]:
        return [to_listing_out(listing) for listing in self.repo.list_by_owner(user_id)]
