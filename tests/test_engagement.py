import pytest
from fastapi.testclient import TestClient

from vidtube.comments.models import Comment
from vidtube.likes.models import Like

API = "/api/v1"


@pytest.mark.parametrize("k", [1, 2, 3, 4, 5])
def test_like_toggle_parity(client: TestClient, make_user, make_video, k):
    a = make_user()
    b = make_user()
    vid = make_video(a["headers"])["id"]

    for i in range(1, k + 1):
        r = client.post(f"{API}/likes/videos/{vid}", headers=b["headers"])
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["isLiked"] is (i % 2 == 1)
        assert data["likesCount"] == (1 if i % 2 == 1 else 0)

    r = client.get(f"{API}/videos/{vid}", headers=b["headers"])
    assert r.json()["data"]["isLiked"] is (k % 2 == 1)
    assert r.json()["data"]["likesCount"] == k % 2


def test_like_counts_from_many_users(client: TestClient, make_user, make_video):
    a = make_user()
    vid = make_video(a["headers"])["id"]
    fans = [make_user() for _ in range(3)]
    for f in fans:
        client.post(f"{API}/likes/videos/{vid}", headers=f["headers"])
    r = client.post(f"{API}/likes/videos/{vid}", headers=fans[0]["headers"])
    assert r.json()["data"] == {"targetId": vid, "likesCount": 2, "isLiked": False}

    r = client.get(f"{API}/likes/likedVideos", headers=fans[1]["headers"])
    assert vid in [v["id"] for v in r.json()["data"]["videos"]]
    r = client.get(f"{API}/likes/likedVideos", headers=fans[0]["headers"])
    assert vid not in [v["id"] for v in r.json()["data"]["videos"]]


def test_like_unknown_target_is_404(client: TestClient, make_user):
    a = make_user()
    for kind in ("videos", "comments", "tweets"):
        r = client.post(f"{API}/likes/{kind}/999999", headers=a["headers"])
        assert r.status_code == 404


def test_delete_comment_keeps_siblings(client: TestClient, make_user, make_video, db_count):
    a = make_user()
    b = make_user()
    vid = make_video(a["headers"])["id"]

    c1 = client.post(f"{API}/comments/video/{vid}", headers=b["headers"], json={"content": "one"}).json()["data"]
    c2 = client.post(f"{API}/comments/video/{vid}", headers=b["headers"], json={"content": "two"}).json()["data"]
    client.post(f"{API}/likes/comments/{c1['id']}", headers=a["headers"])
    client.post(f"{API}/likes/comments/{c2['id']}", headers=a["headers"])

    r = client.get(f"{API}/comments/video/{vid}", headers=a["headers"])
    comments = r.json()["data"]["comments"]
    # más nuevo primero
    assert [c["id"] for c in comments] == [c2["id"], c1["id"]]
    assert all(c["isLiked"] for c in comments)

    r = client.delete(f"{API}/comments/{c1['id']}", headers=b["headers"])
    assert r.status_code == 200

    assert db_count(Comment, id=c1["id"]) == 0
    assert db_count(Like, comment_id=c1["id"]) == 0
    assert db_count(Comment, id=c2["id"]) == 1
    assert db_count(Like, comment_id=c2["id"]) == 1


def test_comment_validation_and_missing_video(client: TestClient, make_user):
    a = make_user()
    r = client.post(f"{API}/comments/video/999999", headers=a["headers"], json={"content": "hi"})
    assert r.status_code == 404

    r = client.post(f"{API}/comments/video/1", headers=a["headers"], json={"content": "   "})
    assert r.status_code == 400


def test_tweets_crud_and_likes(client: TestClient, make_user, db_count):
    a = make_user()
    b = make_user()

    r = client.post(f"{API}/tweets/create", headers=a["headers"], json={"content": "hello 🇨🇷"})
    assert r.status_code == 201
    tweet = r.json()["data"]
    assert tweet["content"] == "hello 🇨🇷"
    assert tweet["owner"]["id"] == a["id"]

    r = client.post(f"{API}/likes/tweets/{tweet['id']}", headers=b["headers"])
    assert r.json()["data"]["likesCount"] == 1

    r = client.patch(f"{API}/tweets/{tweet['id']}", headers=a["headers"], json={"content": "edited"})
    assert r.status_code == 200
    assert r.json()["data"]["content"] == "edited"
    assert r.json()["data"]["likesCount"] == 1

    r = client.get(f"{API}/tweets/user/{a['id']}", headers=b["headers"])
    assert r.json()["data"]["tweets"][0]["isLiked"] is True

    r = client.delete(f"{API}/tweets/{tweet['id']}", headers=a["headers"])
    assert r.status_code == 200
    assert db_count(Like, tweet_id=tweet["id"]) == 0

    r = client.get(f"{API}/tweets/user/999999", headers=a["headers"])
    assert r.status_code == 404
