import pytest
from fastapi.testclient import TestClient
from jose import jwt

from studyhub.api import career as career_api
from studyhub.career.models import JobRole, RoleSkillRequirement, Skill
from studyhub.main import app


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def stored(monkeypatch: pytest.MonkeyPatch) -> dict:
    state: dict = {
        "roles": [
            JobRole(
                id="r1",
                role_name="Data Analyst",
                skills=(RoleSkillRequirement("Python", 0.5), RoleSkillRequirement("SQL", 0.5)),
            )
        ],
        "skills": {"pytest-user": [Skill("Python", 60)]},
        "save_ok": True,
    }

    async def _roles():
        return list(state["roles"])

    async def _skills(user_id: str):
        return list(state["skills"].get(user_id, []))

    async def _replace(user_id: str, skills):
        if not state["save_ok"]:
            return False
        state["skills"][user_id] = list(skills)
        return True

    monkeypatch.setattr(career_api, "fetch_job_roles_async", _roles)
    monkeypatch.setattr(career_api, "fetch_user_skills_async", _skills)
    monkeypatch.setattr(career_api, "replace_user_skills_async", _replace)
    return state


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok", "service": "backend"}


def test_list_roles(client, stored):
    body = client.get("/api/career/roles").json()

    assert body["roles"][0]["role_name"] == "Data Analyst"
    assert body["roles"][0]["skills"] == [
        {"skill_name": "Python", "weight": 0.5},
        {"skill_name": "SQL", "weight": 0.5},
    ]


def test_skills_require_bearer_token(client, stored):
    assert client.get("/api/career/skills").status_code == 401


def test_get_and_put_skills(client, stored, dev_jwt_token):
    headers = {"Authorization": f"Bearer {dev_jwt_token}"}

    assert client.get("/api/career/skills", headers=headers).json() == {
        "skills": [{"skill_name": "Python", "confidence": 60}]
    }

    response = client.put(
        "/api/career/skills",
        headers=headers,
        json={"skills": [{"skill_name": " SQL ", "confidence": 120}]},
    )
    assert response.status_code == 200
    assert response.json() == {"skills": [{"skill_name": "SQL", "confidence": 100}]}
    assert stored["skills"]["pytest-user"] == [Skill("SQL", 100)]


def test_put_rejects_duplicate_skills(client, stored, dev_jwt_token):
    response = client.put(
        "/api/career/skills",
        headers={"Authorization": f"Bearer {dev_jwt_token}"},
        json={"skills": [{"skill_name": "Go"}, {"skill_name": "go"}]},
    )

    assert response.status_code == 400


def test_put_reports_store_failure(client, stored, dev_jwt_token):
    stored["save_ok"] = False

    response = client.put(
        "/api/career/skills",
        headers={"Authorization": f"Bearer {dev_jwt_token}"},
        json={"skills": [{"skill_name": "Go", "confidence": 40}]},
    )

    assert response.status_code == 503


def test_report_against_stored_catalog(client, stored):
    body = client.post(
        "/api/career/report",
        json={"skills": [{"skill_name": "python", "confidence": 80}]},
    ).json()

    [result] = body["results"]
    assert result["fit_score"] == 40
    assert result["fit_band"] == "moderate"
    assert result["missing_skills"] == [{"skill_name": "SQL", "weight": 0.5, "impact": 50.0}]
    assert body["missing_skills"] == ["SQL"]
    assert body["recommendations"] == [
        {"skill_name": "SQL", "current_score": 40, "new_score": 80, "improvement": 40, "role_name": "Data Analyst"}
    ]


def test_report_with_inline_roles(client, stored):
    body = client.post(
        "/api/career/report",
        json={
            "skills": [{"skill_name": "Python", "confidence": 80}, {"skill_name": "SQL", "confidence": 50}],
            "roles": [
                {
                    "role_name": "Data Analyst",
                    "skills": [
                        {"skill_name": "Python", "weight": 0.5},
                        {"skill_name": "SQL", "weight": 0.3},
                        {"skill_name": "Excel", "weight": 0.2},
                    ],
                    "projects": [{"project_name": "Sales dashboard"}],
                },
                {"role_name": "Designer", "skills": [{"skill_name": "Figma", "weight": 1.0}]},
            ],
        },
    ).json()

    assert [r["role"]["role_name"] for r in body["results"]] == ["Data Analyst", "Designer"]
    assert body["results"][0]["fit_score"] == 55
    assert body["results"][0]["role"]["id"] == "1"
    assert body["projects"] == [
        {"project_name": "Sales dashboard", "project_description": "", "role_name": "Data Analyst", "fit_score": 55}
    ]


def test_mind_map_layout_2d(client):
    body = client.post(
        "/api/mindmap/layout",
        json={
            "mind_map": {"id": "1", "label": "Thermodynamics basics", "children": [{"id": "2", "label": "Entropy"}]},
            "center_x": 400,
            "center_y": 300,
        },
    ).json()

    assert body["mode"] == "2d"
    root, child = body["positions"]
    assert (root["x"], root["y"], root["parent_x"]) == (400, 300, None)
    assert root["display_label"] == "Thermodynamics ..."
    assert child["level"] == 1
    assert child["y"] == pytest.approx(440)
    assert [c["node_id"] for c in body["connectors"]] == ["2"]


def test_mind_map_layout_3d_from_generated_content(client):
    body = client.post(
        "/api/mindmap/layout",
        json={"content": '```json\n{"label": "Cells", "children": [{"label": "Nucleus"}]}\n```', "mode": "3d"},
    ).json()

    assert body["mode"] == "3d"
    assert body["positions"][0]["position"] == [0.0, 0.0, 0.0]
    assert body["positions"][1]["id"] == "1.1"


def test_mind_map_layout_rejects_missing_tree(client):
    assert client.post("/api/mindmap/layout", json={}).status_code == 400
    assert client.post("/api/mindmap/layout", json={"content": "nothing"}).status_code == 400


def test_metrics_require_auth_and_count_reports(client, stored, dev_jwt_token):
    assert client.get("/api/system/metrics").status_code == 401

    before = client.get("/api/system/metrics", headers={"Authorization": f"Bearer {dev_jwt_token}"}).json()
    client.post("/api/career/report", json={"skills": []})
    after = client.get("/api/system/metrics", headers={"Authorization": f"Bearer {dev_jwt_token}"}).json()

    assert after["fit_reports_computed"] == before["fit_reports_computed"] + 1


def test_skills_accept_hs256_token_signed_with_secret(client, stored, monkeypatch):
    monkeypatch.setenv("SUPABASE_JWT_SECRET", "unit-test-secret")
    token = jwt.encode({"sub": "pytest-user", "aud": "authenticated"}, "unit-test-secret", algorithm="HS256")

    response = client.get("/api/career/skills", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json() == {"skills": [{"skill_name": "Python", "confidence": 60}]}


def test_hs256_secret_rejects_foreign_and_unsigned_tokens(client, stored, monkeypatch, dev_jwt_token):
    monkeypatch.setenv("SUPABASE_JWT_SECRET", "unit-test-secret")
    forged = jwt.encode({"sub": "pytest-user"}, "some-other-secret", algorithm="HS256")

    for token in (forged, dev_jwt_token):
        response = client.get("/api/career/skills", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


def test_production_refuses_tokens_without_verification(client, stored, monkeypatch, dev_jwt_token):
    monkeypatch.setenv("ENV", "production")

    response = client.get("/api/career/skills", headers={"Authorization": f"Bearer {dev_jwt_token}"})

    assert response.status_code == 500
    assert "SUPABASE_JWT_SECRET" in response.json()["detail"]


def test_development_requires_opt_in_for_unverified_tokens(client, stored, monkeypatch, dev_jwt_token):
    monkeypatch.setenv("ALLOW_UNVERIFIED_JWT_DEV", "false")

    response = client.get("/api/career/skills", headers={"Authorization": f"Bearer {dev_jwt_token}"})

    assert response.status_code == 401


def test_report_drops_weights_too_large_to_score(client, stored):
    response = client.post(
        "/api/career/report",
        json={
            "skills": [{"skill_name": "Python", "confidence": 100}],
            "roles": [
                {
                    "role_name": "Overweighted",
                    "skills": [
                        {"skill_name": "Python", "weight": 1e307},
                        {"skill_name": "SQL", "weight": 0.5},
                    ],
                }
            ],
        },
    )

    assert response.status_code == 200
    [result] = response.json()["results"]
    assert result["fit_score"] == 0
    assert result["matched_skills"] == []
    assert result["missing_skills"] == [{"skill_name": "SQL", "weight": 0.5, "impact": 50.0}]


@pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
def test_mind_map_layout_rejects_non_finite_center(client, literal):
    for field in ("center_x", "center_y"):
        response = client.post(
            "/api/mindmap/layout",
            content=f'{{"mind_map": {{"label": "Root"}}, "{field}": {literal}}}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422
