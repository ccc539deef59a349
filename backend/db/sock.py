from sqlalchemy import Column, Integer, String, UniqueConstraint

from core.constants import SOCKS_TABLE_NAME, SOCKS_UNIQUE_CONSTRAINT
from .database import Base


class Sock(Base):
    """A stock-keeping unit of socks; one row per (color, cotton percentage) pair"""
    __tablename__ = SOCKS_TABLE_NAME
    __table_args__ = (
        UniqueConstraint("color", "cotton_percentage", name=SOCKS_UNIQUE_CONSTRAINT),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    color = Column(String, nullable=False)
    cotton_percentage = Column(Integer, nullable=False)
    amount = Column(Integer, nullable=False, default=0)

    @property
    def to_schema(self):
        """Convert Sock model to schema dictionary format"""
        return {
            "id": self.id,
            "color": self.color,
            "cotton_percentage": self.cotton_percentage,
            "amount": self.amount,
        }

    def __repr__(self) -> str:
        return (
            f"Sock(id={self.id!r}, color={self.color!r}, "
            f"cotton_percentage={self.cotton_percentage!r}, amount={self.amount!r})"
        )
