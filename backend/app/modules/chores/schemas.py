from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class ChoreFrequencyType(str, Enum):
    Daily = "DAILY"
    EveryOtherDay = "EVERY_OTHER_DAY"
    Weekly = "WEEKLY"
    Monthly = "MONTHLY"
    Semiannual = "SEMIANNUAL"
    ConditionalSchedule = "CONDITIONAL_SCHEDULE"


class ChoreTimeBlock(str, Enum):
    Morning = "MORNING"
    Afternoon = "AFTERNOON"
    Night = "NIGHT"
    Any = "ANY"


class HouseholdMemberOut(BaseModel):
    Id: int
    Name: str
    CanEditChores: bool


class HouseholdMemberCreate(BaseModel):
    Name: str = Field(min_length=1, max_length=120)
    CanEditChores: bool = False


class TaskTemplateOut(BaseModel):
    Id: int
    Name: str
    Category: str
    AssignedToId: int
    AssignedTo: HouseholdMemberOut | None = None
    FrequencyType: str
    DayOfWeek: int | None = None
    WeekOfMonth: int | None = None
    DayOfMonth: int | None = None
    SemiannualMonths: list[int] | None = None
    ConditionalAfterTime: str | None = None
    TimeBlock: str
    PointsBase: int
    Active: bool


class TaskTemplateCreate(BaseModel):
    Name: str = Field(min_length=1, max_length=200)
    Category: str = Field(default="", max_length=100)
    AssignedToId: int
    FrequencyType: ChoreFrequencyType = ChoreFrequencyType.Daily
    DayOfWeek: int | None = Field(default=None, ge=0, le=6)
    WeekOfMonth: int | None = Field(default=None, ge=1, le=4)
    DayOfMonth: int | None = Field(default=None, ge=1, le=31)
    SemiannualMonths: list[int] | None = None
    ConditionalAfterTime: str | None = Field(default=None, pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    TimeBlock: ChoreTimeBlock = ChoreTimeBlock.Any
    PointsBase: int = Field(default=1, ge=0)
    Active: bool = True


class TaskTemplateUpdate(BaseModel):
    Name: str | None = Field(default=None, min_length=1, max_length=200)
    Category: str | None = Field(default=None, max_length=100)
    AssignedToId: int | None = None
    FrequencyType: ChoreFrequencyType | None = None
    DayOfWeek: int | None = Field(default=None, ge=0, le=6)
    WeekOfMonth: int | None = Field(default=None, ge=1, le=4)
    DayOfMonth: int | None = Field(default=None, ge=1, le=31)
    SemiannualMonths: list[int] | None = None
    ConditionalAfterTime: str | None = Field(default=None, pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    TimeBlock: ChoreTimeBlock | None = None
    PointsBase: int | None = Field(default=None, ge=0)
    Active: bool | None = None


class TaskInstanceOut(BaseModel):
    Id: int
    TemplateId: int
    TemplateName: str | None = None
    Category: str | None = None
    TimeBlock: str | None = None
    PointsBase: int | None = None
    AssignedToId: int
    AssignedToName: str | None = None
    TaskDate: date
    Status: str
    DoneAt: datetime | None = None
    DoneWithoutReminder: bool
    ComplaintLogged: bool
    IsExtra: bool
    Notes: str | None = None
    AvailableAfter: str | None = None


class TaskCompleteRequest(BaseModel):
    DoneWithoutReminder: bool = False


class TaskInstanceUpdate(BaseModel):
    ComplaintLogged: bool | None = None
    IsExtra: bool | None = None
    Notes: str | None = Field(default=None, max_length=500)


class MaterializeResponse(BaseModel):
    TaskDate: date
    Considered: int
    Generated: int
    Created: int


class WeeklySummaryMemberOut(BaseModel):
    Id: int
    Name: str | None = None


class WeeklySummaryRowOut(BaseModel):
    Member: WeeklySummaryMemberOut
    TotalPoints: int
    Classification: str
    Instances: list[TaskInstanceOut]
    Missed: list[TaskInstanceOut]


class WeeklySummaryResponse(BaseModel):
    WeekStart: date
    WeekEnd: date
    ByUser: list[WeeklySummaryRowOut]
