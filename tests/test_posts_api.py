import itertools
import uuid
from datetime import datetime, timedelta, timezone

from conftest import bearer
from postauth.utils import clock
from postauth.utils.constants import MAX_PAGE


def _create(client, token, title="First post", description="Hello there"):
    return client.post("/api/posts/create-post", json={"title": title, "description": description}, headers=bearer(token))


def test_create_requires_auth(client):
    res = client.post("/api/posts/create-post", json={"title": "abc", "description": "abcdef"})
    assert res.status_code == 403
    assert res.json()["success"] is False


def test_create_and_read_with_owner_email(client, signup, signin):
    signup()
    token = signin()

    res = _create(client, token, title="  Spaced title  ")
    assert res.status_code == 201, res.text
    data = res.json()["data"]
    assert data["title"] == "Spaced title"
    assert data["owner"]["email"] == "a@b.com"
    assert set(data["owner"]) == {"id", "email"}

    res = client.get("/api/posts/single-post", params={"_id": data["id"]})
    assert res.status_code == 200
    assert res.json()["data"]["description"] == "Hello there"


def test_post_field_lengths(client, signup, signin):
    signup()
    token = signin()
    assert _create(client, token, title="ab").status_code == 400
    assert _create(client, token, description="x" * 601).status_code == 400


def test_single_post_missing_or_malformed(client):
    res = client.get("/api/posts/single-post", params={"_id": str(uuid.uuid4())})
    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "Post not found!"}

    assert client.get("/api/posts/single-post", params={"_id": "nope"}).status_code == 400


def test_only_owner_can_update(client, signup, signin):
    signup("owner@b.com")
    signup("other@b.com")
    owner = signin("owner@b.com")
    other = signin("other@b.com")
    post_id = _create(client, owner).json()["data"]["id"]

    changes = {"title": "Hijacked", "description": "Hijacked body"}
    res = client.put("/api/posts/update-post", params={"_id": post_id}, json=changes, headers=bearer(other))
    assert res.status_code == 403
    assert res.json() == {"success": False, "message": "Unauthorized!"}
    assert client.get("/api/posts/single-post", params={"_id": post_id}).json()["data"]["title"] == "First post"

    changes = {"title": "Edited", "description": "Edited body"}
    res = client.put("/api/posts/update-post", params={"_id": post_id}, json=changes, headers=bearer(owner))
    assert res.status_code == 200, res.text
    assert res.json()["data"]["title"] == "Edited"
    assert res.json()["data"]["owner"]["email"] == "owner@b.com"


def test_update_missing_post(client, signup, signin):
    signup()
    token = signin()
    res = client.put(
        "/api/posts/update-post",
        params={"_id": str(uuid.uuid4())},
        json={"title": "Edited", "description": "Edited body"},
        headers=bearer(token),
    )
    assert res.status_code == 404


def test_only_owner_can_delete(client, signup, signin):
    signup("owner@b.com")
    signup("other@b.com")
    owner = signin("owner@b.com")
    other = signin("other@b.com")
    post_id = _create(client, owner).json()["data"]["id"]

    res = client.delete("/api/posts/delete-post", params={"_id": post_id}, headers=bearer(other))
    assert res.status_code == 403

    res = client.delete("/api/posts/delete-post", params={"_id": post_id}, headers=bearer(owner))
    assert res.status_code == 200
    assert client.get("/api/posts/single-post", params={"_id": post_id}).status_code == 404

    res = client.delete("/api/posts/delete-post", params={"_id": post_id}, headers=bearer(owner))
    assert res.status_code == 404


def test_pagination_newest_first(client, signup, signin, monkeypatch):
    signup()
    token = signin()

    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    ticks = itertools.count()
    monkeypatch.setattr(clock, "utcnow", lambda: base + timedelta(seconds=next(ticks)))
    for i in range(12):
        assert _create(client, token, title=f"Post {i:02d}").status_code == 201

    def titles(**params):
        res = client.get("/api/posts/all-posts", params=params)
        assert res.status_code == 200
        return [p["title"] for p in res.json()["data"]]

    first_page = [f"Post {i:02d}" for i in range(11, 1, -1)]
    assert titles() == first_page
    assert titles(page=1) == first_page
    assert titles(page=0) == first_page
    assert titles(page=-3) == first_page
    assert titles(page=2) == ["Post 01", "Post 00"]
    assert titles(page=3) == []


def test_page_beyond_limit_is_rejected(client):
    res = client.get("/api/posts/all-posts", params={"page": 10**20})
    assert res.status_code == 400
    assert res.json()["success"] is False

    res = client.get("/api/posts/all-posts", params={"page": MAX_PAGE})
    assert res.status_code == 200
    assert res.json()["data"] == []
