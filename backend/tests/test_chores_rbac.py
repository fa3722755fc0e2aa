import pytest
from fastapi import HTTPException

from app.modules.chores.models import HouseholdMember
from app.modules.chores.utils.rbac import CanEditChores, RequireChoresEditor


def _AddMember(db_session, name: str, can_edit: bool) -> HouseholdMember:
    member = HouseholdMember(Name=name, CanEditChores=can_edit)
    db_session.add(member)
    db_session.commit()
    return member


def test_can_edit_chores_flags():
    assert CanEditChores(HouseholdMember(Name="Parent", CanEditChores=True))
    assert not CanEditChores(HouseholdMember(Name="Kid", CanEditChores=False))
    assert not CanEditChores(None)


def test_editor_checker_allows_editor(db_session):
    parent = _AddMember(db_session, "Parent", True)
    checker = RequireChoresEditor()
    assert checker(editor_id=str(parent.Id), db=db_session).Id == parent.Id


def test_editor_checker_denies_non_editor(db_session):
    kid = _AddMember(db_session, "Kid", False)
    checker = RequireChoresEditor()
    with pytest.raises(HTTPException) as exc_info:
        checker(editor_id=str(kid.Id), db=db_session)
    assert exc_info.value.status_code == 403


def test_editor_checker_denies_missing_or_bad_header(db_session):
    checker = RequireChoresEditor()
    for editor_id in (None, "", "abc", "999"):
        with pytest.raises(HTTPException) as exc_info:
            checker(editor_id=editor_id, db=db_session)
        assert exc_info.value.status_code == 403


def test_member_create_requires_editor_header(client, db_session):
    kid = _AddMember(db_session, "Kid", False)

    response = client.post("/api/chores/members", json={"Name": "Guest"})
    assert response.status_code == 403

    response = client.post(
        "/api/chores/members",
        json={"Name": "Guest"},
        headers={"X-Editor-User-Id": str(kid.Id)},
    )
    assert response.status_code == 403


def test_member_create_by_editor(client, db_session):
    parent = _AddMember(db_session, "Parent", True)

    response = client.post(
        "/api/chores/members",
        json={"Name": "  Guest  "},
        headers={"X-Editor-User-Id": str(parent.Id)},
    )

    assert response.status_code == 201
    assert response.json()["Name"] == "Guest"
    assert response.json()["CanEditChores"] is False
    names = [member["Name"] for member in client.get("/api/chores/members").json()]
    assert names == ["Parent", "Guest"]
