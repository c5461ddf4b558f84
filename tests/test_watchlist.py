import pytest

from conftest import auth_headers, make_user, make_video
from streamhub.errors import DuplicateError, NotFoundError
from streamhub.models.user_model import UserRole
from streamhub.services import watchlist as watchlist_service


async def test_add_twice_is_rejected(session):
    creator = await make_user(session, role=UserRole.CREATOR, email="c@example.com")
    viewer = await make_user(session, email="v@example.com")
    video = await make_video(session, creator)

    await watchlist_service.add_item(session, viewer.id, video.id)
    with pytest.raises(DuplicateError):
        await watchlist_service.add_item(session, viewer.id, video.id)

    assert len(await watchlist_service.list_items(session, viewer.id)) == 1


async def test_add_unknown_video(session):
    viewer = await make_user(session, email="nov@example.com")
    with pytest.raises(NotFoundError):
        await watchlist_service.add_item(session, viewer.id, 777)


async def test_remove_missing_pair(session):
    viewer = await make_user(session, email="rm@example.com")
    with pytest.raises(NotFoundError):
        await watchlist_service.remove_item(session, viewer.id, 1)


async def test_watchlist_over_http(client, session):
    creator = await make_user(session, role=UserRole.CREATOR, email="wc@example.com", name="Khortha Studio")
    viewer = await make_user(session, email="wv@example.com")
    first = await make_video(session, creator, title="First")
    second = await make_video(session, creator, title="Second")

    for video in (first, second):
        res = await client.post("/watchlist", json={"userId": viewer.id, "videoId": video.id}, headers=auth_headers(viewer))
        assert res.status_code == 200
        assert res.json()["message"] == "Added to watchlist successfully"

    res = await client.post("/watchlist", json={"userId": viewer.id, "videoId": first.id}, headers=auth_headers(viewer))
    assert res.status_code == 400
    assert res.json() == {"error": "Video already in watchlist"}

    res = await client.get("/watchlist", params={"userId": viewer.id}, headers=auth_headers(viewer))
    items = res.json()["watchlist"]
    assert [i["video"]["title"] for i in items] == ["Second", "First"]
    assert items[0]["video"]["creator"]["name"] == "Khortha Studio"

    res = await client.delete("/watchlist", params={"userId": viewer.id, "videoId": first.id}, headers=auth_headers(viewer))
    assert res.status_code == 200

    res = await client.delete("/watchlist", params={"userId": viewer.id, "videoId": first.id}, headers=auth_headers(viewer))
    assert res.status_code == 404

    res = await client.delete("/watchlist", params={"userId": viewer.id}, headers=auth_headers(viewer))
    assert res.status_code == 400

    res = await client.get("/watchlist", params={"userId": viewer.id}, headers=auth_headers(viewer))
    assert [i["videoId"] for i in res.json()["watchlist"]] == [second.id]


async def test_watchlist_is_private_to_its_owner(client, session):
    creator = await make_user(session, role=UserRole.CREATOR, email="pc@example.com")
    owner = await make_user(session, email="po@example.com")
    stranger = await make_user(session, email="ps@example.com")
    video = await make_video(session, creator)
    await watchlist_service.add_item(session, owner.id, video.id)

    res = await client.get("/watchlist", params={"userId": owner.id}, headers=auth_headers(stranger))
    assert res.status_code == 403

    res = await client.delete(
        "/watchlist",
        params={"userId": owner.id, "videoId": video.id},
        headers=auth_headers(stranger),
    )
    assert res.status_code == 403

    res = await client.post("/watchlist", json={"userId": owner.id, "videoId": video.id})
    assert res.status_code == 401

    res = await client.get("/watchlist", params={"userId": owner.id}, headers=auth_headers(owner))
    assert len(res.json()["watchlist"]) == 1
