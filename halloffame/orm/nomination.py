"""
halloffame/orm/nomination.py
Free-text nomination submissions

Several nominations may name the same (name, year) pair; they are grouped
on read, never deduplicated at storage time.
"""
from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text

from halloffame.orm.base import Base, utcnow

# Structured free-text fields, all optional. None means "not provided".
NOMINATION_TEXT_FIELDS = (
    "career_position",
    "professional_achievements",
    "professional_awards",
    "educational_achievements",
    "merit_awards",
    "service_church_community",
    "service_mbaphs",
    "nomination_summary",
    "nominator_name",
    "nominator_email",
    "nominator_phone",
)


class Nomination(Base):
    __tablename__ = "nominations"
    __table_args__ = (
        Index("ix_nominations_person", "name", "year"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    # Stored as text so it compares directly with ballot_selections.person_year
    year = Column(String(20), nullable=True)

    career_position = Column(Text, nullable=True)

    professional_achievements = Column(Text, nullable=True)
    professional_awards = Column(Text, nullable=True)
    educational_achievements = Column(Text, nullable=True)
    merit_awards = Column(Text, nullable=True)

    service_church_community = Column(Text, nullable=True)
    service_mbaphs = Column(Text, nullable=True)

    nomination_summary = Column(Text, nullable=True)

    nominator_name = Column(String(255), nullable=True)
    nominator_email = Column(String(255), nullable=True)
    nominator_phone = Column(String(50), nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    created_by = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    def __repr__(self):
        return f"<Nomination(id={self.id}, name='{self.name}', year={self.year})>"

    def to_export_dict(self) -> dict:
        data = {"name": self.name, "year": self.year}
        for field in NOMINATION_TEXT_FIELDS:
            data[field] = getattr(self, field)
        return data
