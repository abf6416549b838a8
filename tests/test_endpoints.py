"""
HTTP-level tests for the NutriChat API.

Covers:
- Day/week generation returning canonical plans
- Error envelope for client, upstream, malformed and configuration failures
- Shopping list endpoint
- Health check and generic 404 handling
"""

import pytest

from app.config import PipelineConfig
from app.exceptions import UpstreamError
from services.planner_service import PlannerService
from test_fixtures import api_client, as_reply, make_day_plan, make_planner, make_raw_request, make_week_plan  # noqa: F401


# =============================================================================
# PLAN GENERATION
# =============================================================================


def test_generate_day_plan(api_client):
    client, use_planner = api_client
    planner, fake = make_planner(reply=as_reply(make_day_plan()))
    use_planner(planner)

    response = client.post("/api/generate/day", json=make_raw_request("loss"))

    assert response.status_code == 200
    data = response.json()
    assert data["timeframe"] == "day"
    assert [meal["name"] for meal in data["meals"]] == ["燕麥粥", "雞胸沙拉"]
    assert data["meals"][0]["macro"] == {"P": 12, "C": 50, "F": 8}
    assert data["days"] == []
    assert data["profile"]["allergies"] == ["乳"]
    assert "generatedAt" in data
    assert len(fake.calls) == 1


def test_generate_week_plan(api_client):
    client, use_planner = api_client
    planner, _ = make_planner(reply=as_reply(make_week_plan()))
    use_planner(planner)

    response = client.post("/api/generate/week", json=make_raw_request("muscle"))

    assert response.status_code == 200
    data = response.json()
    assert len(data["days"]) == 7
    assert data["meals"] == []
    assert "insights" not in data


def test_young_baby_day_plan_rejected_with_envelope(api_client):
    client, use_planner = api_client
    planner, fake = make_planner(reply=as_reply(make_day_plan()))
    use_planner(planner)

    response = client.post("/api/generate/day", json=make_raw_request("baby_young"))

    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["error"]["code"] == "INVALID_REQUEST"
    assert data["message"] == data["error"]["message"]
    assert fake.calls == []


def test_missing_body_is_missing_goal(api_client):
    client, use_planner = api_client
    planner, _ = make_planner(reply=as_reply(make_day_plan()))
    use_planner(planner)

    response = client.post("/api/generate/day")

    assert response.status_code == 400
    assert response.json()["error"]["details"] == {"field": "goal"}


def test_upstream_timeout_returns_504(api_client):
    client, use_planner = api_client
    planner, _ = make_planner(error=UpstreamError("DeepSeek 回應逾時，請稍後再試。", http_status=504))
    use_planner(planner)

    response = client.post("/api/generate/day", json=make_raw_request("loss"))

    assert response.status_code == 504
    assert response.json()["error"]["code"] == "UPSTREAM_FAILURE"


def test_malformed_reply_returns_502(api_client):
    client, use_planner = api_client
    planner, _ = make_planner(reply="今天不想回答 JSON")
    use_planner(planner)

    response = client.post("/api/generate/week", json=make_raw_request("muscle"))

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "MALFORMED_RESPONSE"


def test_missing_api_key_returns_500(api_client):
    client, use_planner = api_client
    use_planner(PlannerService(PipelineConfig(api_key=None)))

    response = client.post("/api/generate/day", json=make_raw_request("loss"))

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "CONFIGURATION_ERROR"


# =============================================================================
# SHOPPING LIST
# =============================================================================


def test_shopping_list(api_client):
    client, _ = api_client
    plan = {"meals": [{"ingredients": ["雞胸肉(去皮)", "糙米"]}, {"ingredients": ["雞胸肉"]}]}

    response = client.post("/api/shopping-list", json={"plan": plan})

    assert response.status_code == 200
    assert response.json() == {"list": ["- 雞胸肉 ×2", "- 糙米 ×1"]}


def test_shopping_list_without_meals(api_client):
    client, _ = api_client

    response = client.post("/api/shopping-list", json={"plan": {"days": []}})

    assert response.status_code == 400
    assert response.json()["message"] == "尚未找到任何餐點，請先生成食譜。"


@pytest.mark.parametrize("body", [["x"], "plan", 42])
def test_shopping_list_non_object_body(api_client, body):
    client, _ = api_client

    response = client.post("/api/shopping-list", json=body)

    assert response.status_code == 400
    assert response.json()["message"] == "購物清單請傳入有效的計畫資料。"


def test_shopping_list_without_plan(api_client):
    client, _ = api_client

    response = client.post("/api/shopping-list", json={})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"


# =============================================================================
# MISC
# =============================================================================


def test_health(api_client):
    client, _ = api_client

    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.headers["X-Request-ID"]


def test_unknown_route_uses_error_envelope(api_client):
    client, _ = api_client

    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.json()["success"] is False
    assert response.json()["error"]["code"] == "HTTP_404"
