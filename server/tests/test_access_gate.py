from __future__ import annotations

import pytest

from bierzmowanie.auth import capabilities, roles
from bierzmowanie.auth.capabilities import CAPABILITIES


def test_every_action_names_known_roles():
    for action, capability in CAPABILITIES.items():
        assert capability.roles, action
        assert capability.roles <= set(roles.ALL_ROLES), action
        assert capability.privileged <= capability.roles, action


def test_role_gate_uses_or_semantics():
    capability = CAPABILITIES[capabilities.ACCOUNT_CREATE]
    assert capability.allows([roles.CANDIDATE, roles.OFFICE])
    assert not capability.allows([roles.CANDIDATE, roles.PARENT])
    assert not capability.allows([])


def test_missing_token_is_rejected_before_validation(client, candidate_user):
    resp = client.post(f"/candidate/{candidate_user.id}/parent", json={})
    assert resp.status_code == 401
    assert resp.json()["success"] is False


def test_garbage_bearer_token(client, candidate_user):
    resp = client.get(f"/candidate/{candidate_user.id}", headers={"Authorization": "Bearer nonsense"})
    assert resp.status_code == 401
    assert resp.json()["errorType"] == "INVALID_TOKEN"


def test_bearer_header_wins_over_cookie(client, candidate_user, other_candidate, authorize):
    client.post("/auth/login", json={"identifier": "ola.mazur", "password": "secret"})
    authorize(candidate_user)
    resp = client.get("/auth/check-session")
    assert resp.json()["user"]["id"] == candidate_user.id


def test_non_bearer_authorization_falls_back_to_cookie(client, candidate_user):
    client.post("/auth/login", json={"identifier": "jan.kowalski", "password": "secret"})
    resp = client.get("/auth/check-session", headers={"Authorization": "Basic amFuOnNlY3JldA=="})
    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == candidate_user.id


def test_non_bearer_authorization_without_cookie(client, candidate_user):
    resp = client.get("/auth/check-session", headers={"Authorization": "Basic amFuOnNlY3JldA=="})
    assert resp.status_code == 401


def test_insufficient_role_is_forbidden(client, authorize, candidate_user):
    authorize(candidate_user)
    resp = client.post(
        "/accounts",
        json={"password": "tajnehaslo", "imie": "Ala", "nazwisko": "Nowak", "roles": [roles.CANDIDATE]},
    )
    assert resp.status_code == 403
    assert resp.json() == {"success": False, "message": "Insufficient permissions"}


def test_candidate_cannot_act_on_another_candidate(client, authorize, candidate_user, other_candidate):
    authorize(candidate_user)
    resp = client.post(f"/candidate/{other_candidate.id}/parent", json={"imie": "Anna", "nazwisko": "Mazur"})
    assert resp.status_code == 403

    resp = client.get(f"/candidate/{other_candidate.id}")
    assert resp.status_code == 403


def test_candidate_may_read_own_profile(client, authorize, candidate_user):
    authorize(candidate_user)
    resp = client.get(f"/candidate/{candidate_user.id}")
    assert resp.status_code == 200


@pytest.mark.parametrize("fixture_name", ["admin_user", "pastor_user", "office_user"])
def test_staff_bypass_the_ownership_check(request, client, authorize, candidate_user, fixture_name):
    authorize(request.getfixturevalue(fixture_name))
    resp = client.post(
        f"/candidate/{candidate_user.id}/confirmation-name",
        json={"imie": "Franciszek", "uzasadnienie": "Patron ubogich"},
    )
    assert resp.status_code == 200, resp.text


def test_parent_role_may_save_witness_for_any_candidate(client, authorize, parent_user, candidate_user):
    authorize(parent_user)
    resp = client.post(f"/candidate/{candidate_user.id}/witness", json={"imie": "Marek", "nazwisko": "Nowak"})
    assert resp.status_code == 200, resp.text


def test_parent_role_may_not_save_parent(client, authorize, parent_user, candidate_user):
    authorize(parent_user)
    resp = client.post(f"/candidate/{candidate_user.id}/parent", json={"imie": "Ewa", "nazwisko": "Kowalska"})
    assert resp.status_code == 403


def test_animator_assigns_groups_but_reads_only_own_id(client, authorize, animator_user, candidate_user, groups):
    authorize(animator_user)
    resp = client.post(f"/candidate/{candidate_user.id}/group", json={"grupaId": groups[0].id})
    assert resp.status_code == 200, resp.text

    resp = client.get(f"/candidate/{candidate_user.id}")
    assert resp.status_code == 403


def test_non_numeric_account_id_is_a_validation_error(client, authorize, admin_user):
    authorize(admin_user)
    resp = client.get("/candidate/abc")
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_unknown_route_keeps_the_envelope(client):
    resp = client.get("/nowhere")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Not Found"}
