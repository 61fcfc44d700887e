# artmarket/repos/listing_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from artmarket.data.models.listing import ListingModel


class ListingRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_listing(self, listing_id: str) -> ListingModel | None:
        return self.db.execute(
            select(ListingModel).where(ListingModel.id == listing_id)
        ).scalar_one_or_none()

    def list_all(self) -> List[ListingModel]:
        return list(self.db.execute(select(ListingModel).order_by(ListingModel.pk)).scalars())

    def list_by_owner(self, user_id: str) -> List[ListingModel]:
        return list(
            self.db.execute(
                select(ListingModel)
                .where(ListingModel.user_id == user_id)
                .order_by(ListingModel.pk)
            ).scalars()
        )

    def create_listing(self, listing: ListingModel) -> ListingModel:
        self.db.add(listing)
        self.db.commit()
        self.db.refresh(listing)
        return listing

    def replace_listing(self, listing: ListingModel, new_data: dict) -> ListingModel:
        for key, value in new_data.items():
            setattr(listing, key, value)
        self.db.commit()
        self.db.refresh(listing)
        return listing

    def delete_listing(self, listing: ListingModel) -> None:
        self.db.delete(listing)
        self.db.commit()
