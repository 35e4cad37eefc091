from __future__ import annotations

from datetime import datetime, timezone

PROFILE_KEYS = {"podstawowe", "grupa", "rodzic", "swiadek", "imie_bierzmowania", "szkola", "parafia"}


def test_profile_without_relations_renders_nulls(client, authorize, candidate_user):
    authorize(candidate_user)
    resp = client.get(f"/candidate/{candidate_user.id}")

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["success"] is True
    data = body["data"]
    assert set(data) == PROFILE_KEYS
    assert data["podstawowe"] == {
        "id": candidate_user.id,
        "imie": "Jan",
        "nazwisko": "Kowalski",
        "data_urodzenia": "2009-05-14",
        "adres": None,
    }
    for key in PROFILE_KEYS - {"podstawowe"}:
        assert data[key] is None, key


def test_profile_assembles_every_relation(
    client, authorize, admin_user, animator_user, candidate_user, street, school, groups, parishes
):
    authorize(admin_user)
    base = f"/candidate/{candidate_user.id}"
    saves = [
        (
            "/parent",
            {
                "imie": "Anna",
                "nazwisko": "Kowalska",
                "email": "anna@example.com",
                "telefon": "600100200",
                "adres": {"ulica_id": street.id, "nr_budynku": "12", "nr_lokalu": "4", "kod_pocztowy": "31-019"},
            },
        ),
        ("/witness", {"imie": "Marek", "nazwisko": "Nowak", "telefon": "500600700"}),
        ("/confirmation-name", {"imie": "Wojciech", "uzasadnienie": "Patron Polski"}),
        ("/school", {"szkola_id": school.id, "klasa": "3a", "rok_szkolny": "2025/2026"}),
        ("/group", {"grupaId": groups[0].id}),
        ("/parish", {"parafiaId": parishes[0].id}),
    ]
    for suffix, payload in saves:
        resp = client.post(base + suffix, json=payload)
        assert resp.status_code == 200, (suffix, resp.text)

    data = client.get(base).json()["data"]

    assert data["grupa"] == {
        "id": groups[0].id,
        "nazwa": "Grupa św. Jana",
        "animator": {"id": animator_user.id, "imie": "Tomasz", "nazwisko": "Zieliński"},
    }
    assert data["rodzic"]["imie"] == "Anna"
    assert data["rodzic"]["email"] == "anna@example.com"
    assert data["rodzic"]["telefon"] == "600100200"
    assert data["rodzic"]["adres"]["ulica"] == "Floriańska"
    assert data["rodzic"]["adres"]["miejscowosc"] == "Kraków"
    assert data["rodzic"]["adres"]["nr_lokalu"] == "4"
    assert data["swiadek"]["nazwisko"] == "Nowak"
    assert data["swiadek"]["telefon"] == "500600700"
    assert data["swiadek"]["email"] is None
    assert data["swiadek"]["adres"] is None
    assert data["imie_bierzmowania"]["imie"] == "Wojciech"
    assert data["szkola"]["szkola_nazwa"] == "VIII Liceum Ogólnokształcące"
    assert data["szkola"]["klasa"] == "3a"
    assert data["parafia"]["wezwanie"] == "Mariacka"
    assert data["parafia"]["telefon"] == "124220521"


def test_group_without_animator(client, authorize, office_user, candidate_user, groups):
    authorize(office_user)
    client.post(f"/candidate/{candidate_user.id}/group", json={"grupaId": groups[1].id})

    data = client.get(f"/candidate/{candidate_user.id}").json()["data"]
    assert data["grupa"]["nazwa"] == "Grupa św. Pawła"
    assert data["grupa"]["animator"] is None


def test_profile_of_missing_account(client, authorize, admin_user):
    authorize(admin_user)
    resp = client.get("/candidate/9999")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Candidate data not found"}


def test_profile_of_deleted_account(client, authorize, db_session, admin_user, candidate_user):
    candidate_user.deleted_at = datetime.now(timezone.utc)
    db_session.commit()
    authorize(admin_user)
    assert client.get(f"/candidate/{candidate_user.id}").status_code == 404


def test_deleted_animator_is_not_shown(client, authorize, admin_user, candidate_user, groups):
    authorize(admin_user)
    client.post(f"/candidate/{candidate_user.id}/group", json={"grupaId": groups[0].id})
    assert client.delete(f"/accounts/{groups[0].animator_id}").status_code == 200

    data = client.get(f"/candidate/{candidate_user.id}").json()["data"]
    assert data["grupa"]["nazwa"] == "Grupa św. Jana"
    assert data["grupa"]["animator"] is None


def test_deleted_parent_account_is_not_shown(client, authorize, admin_user, candidate_user):
    authorize(admin_user)
    saved = client.post(f"/candidate/{candidate_user.id}/parent", json={"imie": "Anna", "nazwisko": "Kowalska"})
    assert client.delete(f"/accounts/{saved.json()['data']['user_id']}").status_code == 200

    data = client.get(f"/candidate/{candidate_user.id}").json()["data"]
    assert data["rodzic"] is None
