# backend/models/storage.py
from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, JSON, UniqueConstraint, func
from database import Base

# Server-side backing of the shopper's client storage (one row per user and key)
class StoredState(Base):
    __tablename__ = "stored_state" # Table name

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    key = Column(String, nullable=False) # Namespaced storage key, e.g. "storefront:cart"
    value = Column(JSON, nullable=False) # Serialized state document
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        # A user holds at most one value per key
        UniqueConstraint("user_id", "key", name="uq_stored_state_user_key"),
    )
