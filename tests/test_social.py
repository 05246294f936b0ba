from fastapi.testclient import TestClient

API = "/api/v1"


def test_subscription_toggle_scenario(client: TestClient, make_user, make_video):
    a = make_user()
    c = make_user()

    r = client.post(f"{API}/subscriptions/c/{c['id']}", headers=a["headers"])
    assert r.status_code == 200
    assert r.json()["data"] == {"channelId": c["id"], "isSubscribed": True, "subscribersCount": 1}

    r = client.get(f"{API}/subscriptions/check-subscription/{c['id']}", headers=a["headers"])
    assert r.json()["data"]["isSubscribed"] is True

    r = client.post(f"{API}/subscriptions/c/{c['id']}", headers=a["headers"])
    assert r.json()["data"] == {"channelId": c["id"], "isSubscribed": False, "subscribersCount": 0}


def test_cannot_subscribe_to_self_or_missing(client: TestClient, make_user):
    a = make_user()
    r = client.post(f"{API}/subscriptions/c/{a['id']}", headers=a["headers"])
    assert r.status_code == 400
    r = client.post(f"{API}/subscriptions/c/999999", headers=a["headers"])
    assert r.status_code == 404


def test_subscriber_lists_and_channel_profile(client: TestClient, make_user, make_video):
    a = make_user()
    b = make_user()
    c = make_user()
    make_video(c["headers"], title="older")
    latest = make_video(c["headers"], title="newest")

    client.post(f"{API}/subscriptions/c/{c['id']}", headers=a["headers"])
    client.post(f"{API}/subscriptions/c/{c['id']}", headers=b["headers"])

    r = client.get(f"{API}/subscriptions/channel/{c['id']}/subscribers", headers=c["headers"])
    data = r.json()["data"]
    assert data["totalSubscribers"] == 2
    assert {s["id"] for s in data["subscribers"]} == {a["id"], b["id"]}

    r = client.get(f"{API}/subscriptions/user/subscribed", headers=a["headers"])
    channels = r.json()["data"]["channels"]
    assert len(channels) == 1
    assert channels[0]["id"] == c["id"]
    assert channels[0]["isSubscribed"] is True
    assert channels[0]["subscribersCount"] == 2
    assert channels[0]["latestVideo"]["id"] == latest["id"]

    r = client.get(f"{API}/users/channel/{c['username']}", headers=a["headers"])
    profile = r.json()["data"]
    assert profile["subscribersCount"] == 2
    assert profile["isSubscribed"] is True
    assert profile["email"] is None

    r = client.get(f"{API}/users/channel/nobody-here", headers=a["headers"])
    assert r.status_code == 404


def test_playlist_membership(client: TestClient, make_user, make_video):
    a = make_user()
    b = make_user()
    v1 = make_video(a["headers"], title="first")["id"]
    v2 = make_video(b["headers"], title="second")["id"]

    r = client.post(f"{API}/playlists", headers=a["headers"], json={"name": "Watch later", "description": "stuff"})
    assert r.status_code == 201
    pid = r.json()["data"]["id"]

    client.post(f"{API}/playlists/{pid}/v/{v1}", headers=a["headers"])
    client.post(f"{API}/playlists/{pid}/v/{v2}", headers=a["headers"])
    # añadir de nuevo no duplica
    r = client.post(f"{API}/playlists/{pid}/v/{v1}", headers=a["headers"])
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["totalVideos"] == 2
    assert [v["id"] for v in data["videos"]] == [v1, v2]

    r = client.delete(f"{API}/playlists/{pid}/v/{v1}", headers=a["headers"])
    assert r.json()["data"]["totalVideos"] == 1

    r = client.delete(f"{API}/playlists/{pid}/v/{v1}", headers=a["headers"])
    assert r.status_code == 400

    r = client.post(f"{API}/playlists/{pid}/v/999999", headers=a["headers"])
    assert r.status_code == 404

    r = client.patch(f"{API}/playlists/{pid}", headers=a["headers"], json={"name": "Renamed"})
    assert r.json()["data"]["name"] == "Renamed"
    assert r.json()["data"]["description"] == "stuff"

    r = client.patch(f"{API}/playlists/{pid}", headers=a["headers"], json={})
    assert r.status_code == 400

    r = client.get(f"{API}/playlists/user/{a['id']}", headers=b["headers"])
    data = r.json()["data"]
    assert data["totalPlaylists"] == 1
    assert data["playlists"][0]["totalVideos"] == 1

    r = client.delete(f"{API}/playlists/{pid}", headers=a["headers"])
    assert r.status_code == 200
    r = client.get(f"{API}/playlists/{pid}", headers=a["headers"])
    assert r.status_code == 404


def test_playlist_count_matches_visible_videos(client: TestClient, make_user, make_video):
    a = make_user()
    b = make_user()
    c = make_user()
    shown = make_video(a["headers"], title="shown")["id"]
    hidden = make_video(b["headers"], title="hidden")["id"]

    pid = client.post(f"{API}/playlists", headers=a["headers"], json={"name": "mixed"}).json()["data"]["id"]
    client.post(f"{API}/playlists/{pid}/v/{shown}", headers=a["headers"])
    client.post(f"{API}/playlists/{pid}/v/{hidden}", headers=a["headers"])
    r = client.patch(f"{API}/videos/toggle/publish/{hidden}", headers=b["headers"])
    assert r.json()["data"]["isPublished"] is False

    # c y el dueño de la playlist ven solo el publicado
    for viewer in (c, a):
        data = client.get(f"{API}/playlists/{pid}", headers=viewer["headers"]).json()["data"]
        assert [v["id"] for v in data["videos"]] == [shown]
        assert data["totalVideos"] == 1

    # el dueño del video oculto lo sigue viendo
    data = client.get(f"{API}/playlists/{pid}", headers=b["headers"]).json()["data"]
    assert [v["id"] for v in data["videos"]] == [shown, hidden]
    assert data["totalVideos"] == 2

    r = client.get(f"{API}/playlists/user/{a['id']}", headers=c["headers"])
    assert r.json()["data"]["playlists"][0]["totalVideos"] == 1


def test_latest_video_is_per_channel(client: TestClient, make_user, make_video):
    fan = make_user()
    c1 = make_user()
    c2 = make_user()
    make_video(c1["headers"], title="c1 old")
    c1_new = make_video(c1["headers"], title="c1 new")["id"]
    c2_new = make_video(c2["headers"], title="c2 only")["id"]
    c1_hidden = make_video(c1["headers"], title="c1 draft")["id"]
    client.patch(f"{API}/videos/toggle/publish/{c1_hidden}", headers=c1["headers"])

    for ch in (c1, c2):
        client.post(f"{API}/subscriptions/c/{ch['id']}", headers=fan["headers"])

    r = client.get(f"{API}/subscriptions/user/subscribed", headers=fan["headers"])
    latest = {ch["id"]: ch["latestVideo"]["id"] for ch in r.json()["data"]["channels"]}
    # el no publicado no cuenta como último
    assert latest == {c1["id"]: c1_new, c2["id"]: c2_new}


def test_dashboard_stats(client: TestClient, make_user, make_video):
    a = make_user()
    b = make_user()
    v1 = make_video(a["headers"])["id"]
    make_video(a["headers"])

    client.get(f"{API}/videos/{v1}", headers=b["headers"])
    client.post(f"{API}/likes/videos/{v1}", headers=b["headers"])
    client.post(f"{API}/subscriptions/c/{a['id']}", headers=b["headers"])

    r = client.get(f"{API}/dashboard/stats", headers=a["headers"])
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["channelStats"]["totalVideos"] == 2
    assert data["channelStats"]["totalViews"] == 1
    assert data["channelStats"]["totalLikes"] == 1
    assert data["channelStats"]["totalSubscribers"] == 1
    assert sum(d["views"] for d in data["last30DaysPerformance"]) == 1
