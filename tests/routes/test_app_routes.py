import inspect

from fastapi.routing import APIRoute

from matchday.main import app


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Matchday Club API"}


def test_database_endpoints_are_sync():
    # Sync endpoints run in the threadpool, so SQLAlchemy and bcrypt calls stay off the event loop
    routes = [r for r in app.routes if isinstance(r, APIRoute) and r.path != "/"]
    assert routes
    async_endpoints = [r.path for r in routes if inspect.iscoroutinefunction(r.endpoint)]
    assert async_endpoints == []
