"""
halloffame/orm/ballot_selection.py
A committee member's current selections (at most 8 per user)
"""
from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from halloffame.orm.base import Base, utcnow


class BallotSelection(Base):
    __tablename__ = "ballot_selections"
    __table_args__ = (
        UniqueConstraint("user_id", "person_name", "person_year", name="uq_ballot_user_person"),
        Index("idx_ballot_person", "person_name", "person_year"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    person_name = Column(String(255), nullable=False)
    # Empty string when the nomination carries no year
    person_year = Column(String(20), nullable=False, default="")
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="selections")

    def __repr__(self):
        return (
            f"<BallotSelection(user_id={self.user_id}, "
            f"person='{self.person_name}', year='{self.person_year}')>"
        )
