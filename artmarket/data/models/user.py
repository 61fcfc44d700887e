from sqlalchemy import Column, Integer, String
from artmarket.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    # zewnetrzne id (z providera logowania na froncie), unikalne
    user_id = Column(String, nullable=False, unique=True, index=True)
    full_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    image_url = Column(String, nullable=False)
    username = Column(String, nullable=False)
