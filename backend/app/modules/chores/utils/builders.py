from app.modules.chores.models import HouseholdMember, TaskTemplate
from app.modules.chores.schemas import HouseholdMemberOut, TaskInstanceOut, TaskTemplateOut
from app.modules.chores.services.chores_service import DeserializeSemiannualMonths
from app.modules.chores.services.stores import InstanceRecord


def BuildMemberOut(member: HouseholdMember) -> HouseholdMemberOut:
    return HouseholdMemberOut(
        Id=member.Id,
        Name=member.Name,
        CanEditChores=bool(member.CanEditChores),
    )


def BuildTemplateOut(template: TaskTemplate, member: HouseholdMember | None = None) -> TaskTemplateOut:
    return TaskTemplateOut(
        Id=template.Id,
        Name=template.Name,
        Category=template.Category or "",
        AssignedToId=template.AssignedToId,
        AssignedTo=BuildMemberOut(member) if member else None,
        FrequencyType=template.FrequencyType,
        DayOfWeek=template.DayOfWeek,
        WeekOfMonth=template.WeekOfMonth,
        DayOfMonth=template.DayOfMonth,
        SemiannualMonths=DeserializeSemiannualMonths(template.SemiannualMonths),
        ConditionalAfterTime=template.ConditionalAfterTime,
        TimeBlock=template.TimeBlock,
        PointsBase=template.PointsBase,
        Active=template.Active,
    )


def BuildTaskInstanceOut(record: InstanceRecord) -> TaskInstanceOut:
    instance = record.Instance
    template = record.Template
    return TaskInstanceOut(
        Id=instance.Id,
        TemplateId=instance.TemplateId,
        TemplateName=template.Name if template else None,
        Category=template.Category if template else None,
        TimeBlock=template.TimeBlock if template else None,
        PointsBase=template.PointsBase if template else None,
        AssignedToId=instance.AssignedToId,
        AssignedToName=record.Member.Name if record.Member else None,
        TaskDate=instance.TaskDate,
        Status=instance.Status,
        DoneAt=instance.DoneAt,
        DoneWithoutReminder=bool(instance.DoneWithoutReminder),
        ComplaintLogged=bool(instance.ComplaintLogged),
        IsExtra=bool(instance.IsExtra),
        Notes=instance.Notes,
        AvailableAfter=instance.AvailableAfter,
    )
