from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from artmarket.data.database import get_db
from artmarket.domain.errors import ConflictError, MissingFieldsError
from artmarket.domain.schemas import UserCreate, UserOut
from artmarket.services.user_service import UserService

router = APIRouter(prefix="/api/user", tags=["users"])


@router.post("", response_model=UserOut, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.create_user(payload)
    except MissingFieldsError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
