import pytest
from fastapi.testclient import TestClient

from vidtube.core.errors import ForbiddenError, NotFoundError
from vidtube.core.guards import assert_owner

API = "/api/v1"


class _Thing:
    def __init__(self, owner_id):
        self.owner_id = owner_id


def test_assert_owner_rules():
    assert_owner(_Thing(7), 7)
    assert_owner(_Thing(7), "7")
    with pytest.raises(ForbiddenError):
        assert_owner(_Thing(7), 8)
    # inexistente -> 404 antes que 403
    with pytest.raises(NotFoundError):
        assert_owner(None, 8, "Comment")


def test_non_owner_mutations_are_forbidden(client: TestClient, make_user, make_video):
    a = make_user()
    b = make_user()
    vid = make_video(a["headers"])["id"]
    comment = client.post(f"{API}/comments/video/{vid}", headers=a["headers"], json={"content": "mine"}).json()["data"]
    tweet = client.post(f"{API}/tweets/create", headers=a["headers"], json={"content": "mine"}).json()["data"]
    playlist = client.post(f"{API}/playlists", headers=a["headers"], json={"name": "mine"}).json()["data"]

    attempts = [
        ("patch", f"{API}/comments/{comment['id']}", {"json": {"content": "hacked"}}),
        ("delete", f"{API}/comments/{comment['id']}", {}),
        ("patch", f"{API}/tweets/{tweet['id']}", {"json": {"content": "hacked"}}),
        ("delete", f"{API}/tweets/{tweet['id']}", {}),
        ("patch", f"{API}/playlists/{playlist['id']}", {"json": {"name": "hacked"}}),
        ("delete", f"{API}/playlists/{playlist['id']}", {}),
        ("post", f"{API}/playlists/{playlist['id']}/v/{vid}", {}),
        ("patch", f"{API}/videos/update/{vid}", {"data": {"title": "hacked"}}),
        ("delete", f"{API}/videos/{vid}", {}),
        ("patch", f"{API}/videos/toggle/publish/{vid}", {}),
    ]
    for method, url, kwargs in attempts:
        r = getattr(client, method)(url, headers=b["headers"], **kwargs)
        assert r.status_code == 403, (method, url, r.text)
        assert r.json()["success"] is False

    # nada cambió
    r = client.get(f"{API}/videos/{vid}", headers=a["headers"])
    assert r.json()["data"]["title"] == "My video"
    assert r.json()["data"]["commentsCount"] == 1


def test_missing_entities_are_404_not_403(client: TestClient, make_user):
    b = make_user()
    for method, url in [
        ("delete", f"{API}/comments/999999"),
        ("delete", f"{API}/tweets/999999"),
        ("delete", f"{API}/playlists/999999"),
        ("patch", f"{API}/videos/toggle/publish/999999"),
    ]:
        r = getattr(client, method)(url, headers=b["headers"])
        assert r.status_code == 404, (method, url)
