#artmarket/api/routers/carts.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from artmarket.data.database import get_db
from artmarket.domain.errors import MissingFieldsError, NotFoundError
from artmarket.domain.schemas import (
    CartBatchDeleteIn,
    CartBatchDeleteOut,
    CartItemIn,
    CartItemOut,
    CartOut,
)
from artmarket.services.cart_service import CartService

router = APIRouter(tags=["carts"])


def get_service(db: Session):
    return CartService(db=db)


@router.post("/cart", response_model=CartOut, status_code=201)
def add_item(payload: CartItemIn, response: Response, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        cart, created = svc.add_item(payload)
    except MissingFieldsError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not created:
        response.status_code = 200
    return cart


@router.get("/api/cart/{user_id}", response_model=List[CartItemOut])
def list_items(user_id: str, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.list_items(user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/api/cart/{user_id}/{art_id}")
def remove_item(user_id: str, art_id: str, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        outcome = svc.remove_item(user_id, art_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if outcome["deleted"]:
        return {"message": "Cart deleted"}
    return outcome["cart"].model_dump(by_alias=True)


@router.delete("/deletefromcart", response_model=CartBatchDeleteOut)
def remove_items(payload: CartBatchDeleteIn, db: Session = Depends(get_db)):
    """
    Zawsze 200 - wynik kazdej pary jest w results.
    """
    svc = get_service(db)
    results = svc.remove_many(payload.cart_items)
    removed = sum(1 for r in results if r.removed)
    return {
        "message": f"Removed {removed} of {len(results)} cart item(s)",
        "results": results,
    }
