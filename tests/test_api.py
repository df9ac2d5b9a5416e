import pytest
from fastapi.testclient import TestClient

from career_compass.api.main import app
from career_compass.core.config import reset_settings_cache
from career_compass.api import deps

client = TestClient(app)


@pytest.fixture(params=["json", "sqlite"])
def provider(request, isolated_env):
    isolated_env.setenv("DATA_PROVIDER", request.param)
    reset_settings_cache()
    deps.reset_service_cache()
    return request.param


@pytest.mark.smoke
def test_health(provider):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "data_provider": provider, "narrative_provider": "none"}


@pytest.mark.smoke
def test_roles_catalog(provider):
    r = client.get("/roles/")
    assert r.status_code == 200, r.text
    assert len(r.json()) == 21

    r = client.get("/roles/", params={"category": "HEALTH"})
    assert {x["id"] for x in r.json()} == {"PHYSICIAN", "NURSE", "PSYCHOLOGIST", "DENTIST"}

    r = client.get("/roles/SOFTWARE_ENGINEER")
    assert r.status_code == 200
    assert r.json()["requirements"][0]["competency_id"] == "PROGRAMMING"

    r = client.get("/roles/NOPE")
    assert r.status_code == 404
    assert "NOPE" in r.json()["detail"]


def test_competency_taxonomy(provider):
    r = client.get("/competencies/")
    assert r.status_code == 200
    assert len(r.json()) == 27
    r = client.get("/competencies/", params={"category": "PHYSICAL"})
    assert {c["id"] for c in r.json()} == {"PHYSICAL_COORDINATION", "STAMINA", "MANUAL_DEXTERITY"}


def test_person_competencies_and_stats(provider):
    r = client.get("/people/p-ada/competencies")
    assert r.status_code == 200, r.text
    levels = {e["competency_id"]: e["current_level"] for e in r.json()["entries"]}
    assert levels["PROGRAMMING"] == 7
    assert levels["MATH_SKILLS"] == 8
    assert levels["STRATEGIC_THINKING"] == 8

    r = client.post("/people/p-ada/competencies/refresh")
    assert r.status_code == 200
    assert len(r.json()["entries"]) == len(levels)

    r = client.get("/people/p-ada/competencies/stats")
    assert r.status_code == 200
    assert r.json()["total"] == len(levels)

    assert client.get("/people/ghost/competencies").status_code == 404


def test_analysis_and_history(provider):
    r = client.get("/people/p-ada/analysis")
    assert r.status_code == 200, r.text
    body = r.json()
    scores = [m["match_score"] for m in body["top_matches"]]
    assert len(scores) == 10
    assert scores == sorted(scores, reverse=True)
    assert 0 <= body["overall_compatibility"] <= 100

    r = client.get("/people/p-ada/analysis", params={"role_id": "DATA_SCIENTIST"})
    assert r.status_code == 200
    assert r.json()["target_match"]["role_id"] == "DATA_SCIENTIST"

    assert client.get("/people/p-ada/analysis", params={"role_id": "NOPE"}).status_code == 404

    r = client.get("/people/p-ada/analysis/history")
    assert [a["target_match"] is None for a in r.json()] == [False, True]


def test_compare(provider):
    r = client.post("/people/p-bo/compare", json={"role_ids": ["SOFTWARE_ENGINEER", "SOCIAL_WORKER"]})
    assert r.status_code == 200, r.text
    assert [m["role_id"] for m in r.json()] == ["SOCIAL_WORKER", "SOFTWARE_ENGINEER"]
    assert client.post("/people/p-bo/compare", json={"role_ids": []}).status_code == 422
    assert client.post("/people/p-bo/compare", json={"role_ids": ["NOPE"]}).status_code == 404


def test_roadmap_flow(provider):
    r = client.post("/people/p-bo/roadmaps", json={"role_id": "TEACHER", "custom_goals": ["Lead a school play"]})
    assert r.status_code == 201, r.text
    first = r.json()
    assert first["status"] == "ACTIVE"
    assert first["recommendations"][-1] == "Personal goal: Lead a school play"
    assert first["motivational_notes"]
    assert first["current_match_score"] <= first["projected_match_score"]

    r = client.post("/people/p-bo/roadmaps", json={"role_id": "JOURNALIST"})
    second = r.json()

    r = client.get("/people/p-bo/roadmaps/active")
    assert r.json()["id"] == second["id"]
    statuses = sorted(x["status"] for x in client.get("/people/p-bo/roadmaps").json())
    assert statuses == ["ACTIVE", "ARCHIVED"]

    r = client.patch(f"/roadmaps/{first['id']}", json={"status": "ACTIVE"})
    assert r.status_code == 422

    r = client.patch(f"/roadmaps/{second['id']}", json={"current_match_score": 61.5})
    assert r.status_code == 200
    assert r.json()["current_match_score"] == 61.5

    r = client.post(f"/roadmaps/{second['id']}/complete")
    assert r.json()["status"] == "COMPLETED"
    assert client.get("/people/p-bo/roadmaps/active").status_code == 404

    assert client.delete(f"/roadmaps/{first['id']}").status_code == 204
    assert client.delete(f"/roadmaps/{first['id']}").status_code == 404
    assert client.post("/people/p-bo/roadmaps", json={"role_id": "NOPE"}).status_code == 404


def test_match_score(provider):
    r = client.post(
        "/match/score",
        json={"role_id": "MATHEMATICIAN", "levels": {"MATH_SKILLS": 10, "CRITICAL_THINKING": 9}, "metric": "euclidean"},
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["metric"]["metric"] == "euclidean"
    assert body["match"]["role_id"] == "MATHEMATICIAN"
    assert [g["competency_id"] for g in body["match"]["gaps"]] == ["RESEARCH_SKILLS", "WRITTEN_COMMUNICATION", "DATA_ANALYSIS"]

    bad_level = client.post("/match/score", json={"role_id": "MATHEMATICIAN", "levels": {"MATH_SKILLS": 11}})
    assert bad_level.status_code == 422
    unknown = client.post("/match/score", json={"role_id": "MATHEMATICIAN", "levels": {"JUGGLING": 5}})
    assert unknown.status_code == 422
    bad_metric = client.post("/match/score", json={"role_id": "MATHEMATICIAN", "levels": {}, "metric": "manhattan"})
    assert bad_metric.status_code == 422


def test_cors_preflight(provider):
    pre = client.options("/roles/", headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"})
    assert pre.status_code in (200, 204)
