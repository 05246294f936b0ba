import pytest
from fastapi.testclient import TestClient

from vidtube.core.pagination import PageParams, page_meta, total_pages

API = "/api/v1"


@pytest.mark.parametrize(
    "total,limit,expected",
    [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (7, 3, 3)],
)
def test_total_pages(total, limit, expected):
    assert total_pages(total, limit) == expected


def test_page_meta_and_offset():
    params = PageParams(page=3, limit=4)
    assert params.offset == 8
    assert page_meta(9, params, "totalTweets") == {
        "totalTweets": 9,
        "currentPage": 3,
        "totalPages": 3,
        "limit": 4,
    }


def test_pages_cover_all_tweets_without_duplicates(client: TestClient, make_user):
    a = make_user()
    created = []
    for i in range(7):
        r = client.post(f"{API}/tweets/create", headers=a["headers"], json={"content": f"t{i}"})
        created.append(r.json()["data"]["id"])

    r = client.get(f"{API}/tweets/user/{a['id']}", params={"page": 1, "limit": 3}, headers=a["headers"])
    first = r.json()["data"]
    assert first["totalTweets"] == 7
    assert first["totalPages"] == 3
    assert first["currentPage"] == 1
    assert first["limit"] == 3

    seen = []
    for page in range(1, first["totalPages"] + 1):
        r = client.get(f"{API}/tweets/user/{a['id']}", params={"page": page, "limit": 3}, headers=a["headers"])
        seen.extend(t["id"] for t in r.json()["data"]["tweets"])

    assert len(seen) == 7
    assert len(set(seen)) == 7
    assert set(seen) == set(created)
    # más nuevos primero
    assert seen == sorted(created, reverse=True)


def test_video_pages_cover_all(client: TestClient, make_user, make_video):
    a = make_user()
    ids = {make_video(a["headers"], title=f"v{i}")["id"] for i in range(5)}

    seen = []
    page = 1
    while True:
        r = client.get(f"{API}/videos", params={"userId": a["id"], "page": page, "limit": 2})
        data = r.json()["data"]
        seen.extend(v["id"] for v in data["videos"])
        if page >= data["totalPages"]:
            break
        page += 1

    assert data["totalVideos"] == 5
    assert sorted(seen) == sorted(ids)


def test_invalid_page_params(client: TestClient, make_user):
    a = make_user()
    for params in ({"page": 0}, {"limit": 0}, {"limit": 101}, {"page": "x"}):
        r = client.get(f"{API}/tweets", params=params, headers=a["headers"])
        assert r.status_code == 400, params
