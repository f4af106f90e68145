from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from poopal.database import Base


class ChatMessage(Base):
    """One turn of a Dr. Poo conversation (user question or cleaned reply)."""

    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True)
    user_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    role = Column(String(10), nullable=False)  # 'user' or 'assistant'
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="chat_messages")

    __table_args__ = (Index("idx_chat_messages_user_id", "user_id", "id"),)
