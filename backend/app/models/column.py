# backend/app/models/column.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from app.core.database import Base


class BoardColumn(Base):
    """One stage of a user's board. `key` is the immutable slug tasks point at."""
    __tablename__ = "board_columns"
    __table_args__ = (
        UniqueConstraint("owner_id", "key", name="uq_board_columns_owner_key"),
    )

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    key = Column(String(64), nullable=False)
    label = Column(String(80), nullable=False)
    position = Column(Integer, nullable=False, default=0)  # left-to-right rank on the board

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_dict(self) -> dict:
        return {"id": str(self.id), "key": self.key, "label": self.label, "position": self.position}

    def __repr__(self):
        return f"<BoardColumn(owner_id={self.owner_id}, key={self.key}, position={self.position})>"
