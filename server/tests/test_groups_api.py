from __future__ import annotations

from bierzmowanie.models.group import GroupMembership


def _members(db_session) -> dict[int, int]:
    db_session.expire_all()
    return {row.account_id: row.group_id for row in db_session.query(GroupMembership).all()}


def test_replace_members_moves_candidates_between_groups(
    client, authorize, db_session, animator_user, candidate_user, other_candidate, groups
):
    authorize(animator_user)
    client.post(f"/candidate/{candidate_user.id}/group", json={"grupaId": groups[1].id})

    resp = client.put(
        f"/groups/{groups[0].id}/members",
        json={"kandydatIds": [candidate_user.id, other_candidate.id, candidate_user.id]},
    )

    assert resp.status_code == 200, resp.text
    assert resp.json() == {"success": True, "message": "Group members updated"}
    assert _members(db_session) == {candidate_user.id: groups[0].id, other_candidate.id: groups[0].id}

    resp = client.put(f"/groups/{groups[0].id}/members", json={"kandydatIds": [other_candidate.id]})
    assert resp.status_code == 200
    assert _members(db_session) == {other_candidate.id: groups[0].id}


def test_empty_list_clears_the_group(client, authorize, db_session, office_user, candidate_user, groups):
    authorize(office_user)
    client.post(f"/candidate/{candidate_user.id}/group", json={"grupaId": groups[0].id})

    assert client.put(f"/groups/{groups[0].id}/members", json={"kandydatIds": []}).status_code == 200
    assert _members(db_session) == {}


def test_replace_members_validates_group_and_candidates(
    client, authorize, db_session, admin_user, parent_user, candidate_user, groups
):
    authorize(admin_user)
    client.post(f"/candidate/{candidate_user.id}/group", json={"grupaId": groups[0].id})

    assert client.put("/groups/9999/members", json={"kandydatIds": []}).status_code == 404
    resp = client.put(f"/groups/{groups[1].id}/members", json={"kandydatIds": [candidate_user.id, parent_user.id]})
    assert resp.status_code == 404
    assert resp.json()["message"] == f"Candidates not found: {parent_user.id}"
    assert _members(db_session) == {candidate_user.id: groups[0].id}
    assert client.put(f"/groups/{groups[1].id}/members", json={}).status_code == 400


def test_candidates_may_not_replace_members(client, authorize, candidate_user, groups):
    authorize(candidate_user)
    resp = client.put(f"/groups/{groups[0].id}/members", json={"kandydatIds": [candidate_user.id]})
    assert resp.status_code == 403
