from sqlalchemy import select
from sqlalchemy.orm import Session
from artmarket.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_user_id(self, user_id: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.user_id == user_id)
        ).scalar_one_or_none()

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def rollback(self):
        self.db.rollback()
