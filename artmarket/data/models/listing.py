#artmarket/data/models/listing.py
import uuid

from sqlalchemy import Column, Integer, String, Float, JSON

from artmarket.data.database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class ListingModel(Base):
    __tablename__ = "listings"

    # pk tylko wewnetrznie (kolejnosc wstawiania), na zewnatrz idzie id
    pk = Column(Integer, primary_key=True)
    id = Column(String(32), nullable=False, unique=True, index=True, default=_new_id)

    category = Column(String, nullable=False)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    images = Column(JSON, nullable=False, default=list)

    # wlasciciel - zwykly string, bez FK
    user_id = Column(String, nullable=False, index=True)
