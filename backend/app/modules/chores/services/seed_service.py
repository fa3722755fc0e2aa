from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.modules.chores.models import HouseholdMember, TaskTemplate

logger = logging.getLogger("chores.seed")

SUN, MON, TUE, WED, THU, FRI, SAT = range(7)

DEFAULT_MEMBERS = [
    {"Name": "Parent", "CanEditChores": True},
    {"Name": "Older Teen", "CanEditChores": False},
    {"Name": "Younger Teen", "CanEditChores": False},
    {"Name": "Kid", "CanEditChores": False},
]

# (name, category, assignee, frequency, time block, rule fields)
DEFAULT_TEMPLATES = [
    ("Walk the dog (morning)", "Pet Care", "Kid", "DAILY", "MORNING", {}),
    ("Walk the dog (afternoon)", "Pet Care", "Older Teen", "DAILY", "AFTERNOON", {}),
    ("Walk the dog (night)", "Pet Care", "Younger Teen", "DAILY", "NIGHT", {}),
    ("Refill pet food and water", "Pet Care", "Kid", "DAILY", "MORNING", {}),
    ("Kitchen dishes (keep sink clear)", "Kitchen", "Younger Teen", "DAILY", "NIGHT", {}),
    ("Wipe tables and countertops", "Kitchen", "Older Teen", "DAILY", "MORNING", {}),
    ("Scoop the litter box", "Pet Care", "Kid", "EVERY_OTHER_DAY", "AFTERNOON", {}),
    ("Mop shared floors", "Shared Areas", "Kid", "EVERY_OTHER_DAY", "AFTERNOON", {}),
    ("Wash pet bedding", "Pet Care", "Kid", "WEEKLY", "ANY", {"DayOfWeek": MON}),
    ("Clean microwave and stove", "Kitchen", "Older Teen", "WEEKLY", "ANY", {"DayOfWeek": WED}),
    ("Check fridge for expired food", "Kitchen", "Parent", "WEEKLY", "ANY", {"DayOfWeek": WED}),
    ("Dust and polish furniture", "Shared Areas", "Kid", "WEEKLY", "ANY", {"DayOfWeek": THU}),
    ("Wash bedsheets", "Laundry", "Parent", "WEEKLY", "ANY", {"DayOfWeek": FRI}),
    ("Vacuum bedroom floor", "Bedrooms", "Older Teen", "WEEKLY", "ANY", {"DayOfWeek": SAT}),
    ("Vacuum bedroom floor", "Bedrooms", "Younger Teen", "WEEKLY", "ANY", {"DayOfWeek": SAT}),
    ("Empty bedroom trash", "Trash", "Kid", "WEEKLY", "NIGHT", {"DayOfWeek": TUE}),
    ("Change the litter box", "Pet Care", "Kid", "MONTHLY", "ANY", {"WeekOfMonth": 1}),
    ("Groom pets", "Pet Care", "Older Teen", "MONTHLY", "ANY", {"WeekOfMonth": 2}),
    ("Clean glass doors", "Shared Areas", "Younger Teen", "MONTHLY", "ANY", {"WeekOfMonth": 3}),
    ("Clean and organize pantry", "Kitchen", "Parent", "MONTHLY", "ANY", {"WeekOfMonth": 4}),
    ("Change air filters", "Household Maintenance", "Younger Teen", "SEMIANNUAL", "ANY", {"SemiannualMonths": "[1,7]"}),
    ("Apply pesticides", "Household Maintenance", "Parent", "SEMIANNUAL", "ANY", {"SemiannualMonths": "[1,7]"}),
    (
        "Take out all trash for pickup",
        "Trash",
        "Younger Teen",
        "CONDITIONAL_SCHEDULE",
        "ANY",
        {"DayOfWeek": THU, "ConditionalAfterTime": "18:00"},
    ),
    (
        "Take out regular trash",
        "Trash",
        "Younger Teen",
        "CONDITIONAL_SCHEDULE",
        "NIGHT",
        {"DayOfWeek": FRI, "ConditionalAfterTime": "21:00"},
    ),
]


@dataclass(frozen=True)
class SeedResult:
    MembersCreated: int
    TemplatesCreated: int


def _EnsureMembers(db: Session) -> tuple[dict[str, HouseholdMember], int]:
    existing = {member.Name: member for member in db.query(HouseholdMember).all()}
    created = 0
    for entry in DEFAULT_MEMBERS:
        if entry["Name"] in existing:
            continue
        member = HouseholdMember(**entry)
        db.add(member)
        existing[entry["Name"]] = member
        created += 1
    db.flush()
    return existing, created


def SeedDefaultHousehold(db: Session) -> SeedResult:
    members, members_created = _EnsureMembers(db)

    if db.query(TaskTemplate).count() > 0:
        db.commit()
        logger.info("templates already present, skipping template seed")
        return SeedResult(MembersCreated=members_created, TemplatesCreated=0)

    for name, category, assignee, frequency, time_block, fields in DEFAULT_TEMPLATES:
        db.add(
            TaskTemplate(
                Name=name,
                Category=category,
                AssignedToId=members[assignee].Id,
                FrequencyType=frequency,
                TimeBlock=time_block,
                PointsBase=1,
                Active=True,
                **fields,
            )
        )
    db.commit()
    logger.info(
        "seeded household members=%s templates=%s",
        members_created,
        len(DEFAULT_TEMPLATES),
    )
    return SeedResult(MembersCreated=members_created, TemplatesCreated=len(DEFAULT_TEMPLATES))
