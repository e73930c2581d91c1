"""User model."""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text, Uuid
from sqlalchemy.orm import relationship

from baanboard.core.permissions import Role
from baanboard.db.session import Base, JSONList


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    fullname = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    tel = Column(String(30), nullable=False)
    password_hash = Column(String(255), nullable=False)
    profile_image = Column(Text, nullable=True)
    role = Column(String(10), nullable=False, default=Role.USER.value)  # user | admin

    # Post id strings, maintained by the engagement service
    my_posts = Column(JSONList, nullable=False, default=list)
    liked_posts = Column(JSONList, nullable=False, default=list)
    commented_posts = Column(JSONList, nullable=False, default=list)

    created_at = Column(DateTime, default=datetime.utcnow)

    posts = relationship("Post", back_populates="owner")
