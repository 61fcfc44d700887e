from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from artmarket.data.models.user import UserModel
from artmarket.domain.errors import ConflictError, MissingFieldsError
from artmarket.domain.schemas import UserCreate, UserOut
from artmarket.repos.user_repo import UserRepo
from artmarket.utils.sanitize import is_blank
from artmarket.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ("user_id", "full_name", "email", "image_url", "username")


def to_user_out(user: UserModel) -> UserOut:
    return UserOut(
        id=user.id,
        user_id=user.user_id,
        full_name=user.full_name,
        email=user.email,
        image_url=user.image_url,
        username=user.username,
    )


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserOut:
        missing = [f for f in REQUIRED_FIELDS if is_blank(getattr(payload, f))]
        if missing:
            raise MissingFieldsError(missing)

        if self.repo.get_by_user_id(payload.user_id):
            raise ConflictError("User already exists")

        user = UserModel(
            user_id=payload.user_id,
            full_name=payload.full_name,
            email=payload.email,
            image_url=payload.image_url,
            username=payload.username,
        )

        try:
            created = self.repo.create_user(user)
        except IntegrityError:
            # rownolegla rejestracja tego samego UserId - unique constraint
            self.repo.rollback()
            raise ConflictError("User already exists")

        logger.info(f"Registered user {created.user_id}")
        return to_user_out(created)
