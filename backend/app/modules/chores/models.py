from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from app.db import CHORES_SCHEMA, Base, EnsureSchema


class HouseholdMember(Base):
    __tablename__ = "household_members"
    __table_args__ = ({"schema": CHORES_SCHEMA},)

    Id = Column(Integer, primary_key=True, index=True)
    Name = Column(String(120), nullable=False)
    CanEditChores = Column(Boolean, nullable=False, default=False)
    CreatedAt = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)


class TaskTemplate(Base):
    __tablename__ = "task_templates"
    __table_args__ = ({"schema": CHORES_SCHEMA},)

    Id = Column(Integer, primary_key=True, index=True)
    Name = Column(String(200), nullable=False)
    Category = Column(String(100), nullable=False, default="")
    AssignedToId = Column(
        Integer,
        ForeignKey(f"{CHORES_SCHEMA}.household_members.Id"),
        nullable=False,
        index=True,
    )
    FrequencyType = Column(String(30), nullable=False, default="DAILY")
    DayOfWeek = Column(Integer)
    WeekOfMonth = Column(Integer)
    DayOfMonth = Column(Integer)
    SemiannualMonths = Column(String(50))
    ConditionalAfterTime = Column(String(5))
    TimeBlock = Column(String(20), nullable=False, default="ANY")
    PointsBase = Column(Integer, nullable=False, default=1)
    Active = Column(Boolean, nullable=False, default=True)
    CreatedAt = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    UpdatedAt = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)


class TaskInstance(Base):
    __tablename__ = "task_instances"
    __table_args__ = (
        UniqueConstraint("TemplateId", "TaskDate", name="uq_chores_instances_template_date"),
        Index("ix_chores_instances_assignee_date", "AssignedToId", "TaskDate"),
        {"schema": CHORES_SCHEMA},
    )

    Id = Column(Integer, primary_key=True, index=True)
    TemplateId = Column(
        Integer,
        ForeignKey(f"{CHORES_SCHEMA}.task_templates.Id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    AssignedToId = Column(
        Integer,
        ForeignKey(f"{CHORES_SCHEMA}.household_members.Id"),
        nullable=False,
    )
    TaskDate = Column(Date, nullable=False, index=True)
    Status = Column(String(20), nullable=False, default="PENDING")
    DoneAt = Column(DateTime(timezone=True))
    DoneWithoutReminder = Column(Boolean, nullable=False, default=False)
    ComplaintLogged = Column(Boolean, nullable=False, default=False)
    IsExtra = Column(Boolean, nullable=False, default=False)
    Notes = Column(Text)
    AvailableAfter = Column(String(5))
    CreatedAt = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)


CHORES_TABLES = [HouseholdMember, TaskTemplate, TaskInstance]


def CreateChoresTables(bind) -> None:
    with bind.begin() as connection:
        EnsureSchema(connection)
        for table in CHORES_TABLES:
            table.__table__.create(bind=connection, checkfirst=True)
