from todo_collab.api.home import WELCOME


def test_root_returns_welcome(app):
    res = app.test_client().get("/")
    assert res.status_code == 200
    assert res.get_data(as_text=True) == WELCOME


def test_health_reports_database_state(app):
    res = app.test_client().get("/api/health")
    body = res.get_json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"


def test_unknown_route_is_json_404(app):
    res = app.test_client().get("/nope")
    assert res.status_code == 404
    assert res.get_json() == {"error": "not found"}
