"""Post model. Likes and comments are embedded in the row."""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from baanboard.db.session import Base, JSONList


class Post(Base):
    __tablename__ = "posts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    tag = Column(String(50), nullable=False, index=True)
    image = Column(Text, nullable=True)
    likes = Column(JSONList, nullable=False, default=list)  # user id strings
    comments = Column(JSONList, nullable=False, default=list)  # {id, text, owner, created_at}
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    owner = relationship("User", back_populates="posts")
