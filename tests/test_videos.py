import pytest

from conftest import auth_headers, make_user, make_video
from streamhub.errors import NotFoundError, ValidationError
from streamhub.models.user_model import UserRole
from streamhub.models.video_model import Review, VideoCategory, VideoLanguage
from streamhub.services import videos as video_service


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, "0:00"), (59, "0:59"), (61, "1:01"), (3600, "1:00:00"), (5400, "1:30:00"), (7325, "2:02:05")],
)
def test_format_duration(seconds, expected):
    assert video_service.format_duration(seconds) == expected


async def test_only_approved_public_videos_are_listed(session):
    creator = await make_user(session, role=UserRole.CREATOR, email="c@example.com")
    await make_video(session, creator, title="Live")
    await make_video(session, creator, title="Waiting", approved=False)
    # public flag without an approval timestamp stays hidden
    await make_video(session, creator, title="Half", approved=False, is_public=True)

    cards, has_more = await video_service.list_public(session)
    assert [c["title"] for c in cards] == ["Live"]
    assert has_more is False


async def test_filters_and_search(session):
    creator = await make_user(session, role=UserRole.CREATOR, email="f@example.com")
    await make_video(session, creator, title="Jharkhand Beats", category=VideoCategory.MUSIC)
    await make_video(
        session, creator, title="Santali Roots",
        category=VideoCategory.DOCUMENTARY, language=VideoLanguage.SANTALI, tags="heritage,forest",
    )
    await make_video(session, creator, title="Hindi Drama", language=VideoLanguage.HINDI)

    cards, _ = await video_service.list_public(session, category="music")
    assert [c["title"] for c in cards] == ["Jharkhand Beats"]

    cards, _ = await video_service.list_public(session, language="SANTALI")
    assert [c["title"] for c in cards] == ["Santali Roots"]

    cards, _ = await video_service.list_public(session, search="FOREST")
    assert [c["title"] for c in cards] == ["Santali Roots"]

    cards, _ = await video_service.list_public(session, category="all", language="all")
    assert len(cards) == 3

    with pytest.raises(ValidationError):
        await video_service.list_public(session, category="SITCOM")


async def test_trending_orders_by_views(session):
    creator = await make_user(session, role=UserRole.CREATOR, email="t@example.com")
    await make_video(session, creator, title="Quiet", view_count=3)
    await make_video(session, creator, title="Viral", view_count=900)
    await make_video(session, creator, title="Newest", view_count=10)

    cards, _ = await video_service.list_public(session, trending=True)
    assert [c["title"] for c in cards] == ["Viral", "Newest", "Quiet"]

    cards, _ = await video_service.list_public(session)
    assert cards[0]["title"] == "Newest"


async def test_card_carries_rating_and_creator(session):
    creator = await make_user(session, role=UserRole.CREATOR, email="r@example.com", name="Ranchi Reels")
    viewer_a = await make_user(session, email="a@example.com")
    viewer_b = await make_user(session, email="b@example.com")
    video = await make_video(session, creator)
    session.add_all([
        Review(user_id=viewer_a.id, video_id=video.id, rating=5),
        Review(user_id=viewer_b.id, video_id=video.id, rating=4),
    ])
    await session.commit()

    cards, _ = await video_service.list_public(session)
    card = cards[0]
    assert card["rating"] == 4.5
    assert card["review_count"] == 2
    assert card["duration"] == "1:30:00"
    assert card["creator"]["name"] == "Ranchi Reels"


async def test_record_watch_counts_views(session):
    creator = await make_user(session, role=UserRole.CREATOR, email="w@example.com")
    viewer = await make_user(session, email="viewer@example.com")
    video = await make_video(session, creator)

    await video_service.record_watch(session, video.id, viewer.id, 120)
    await video_service.record_watch(session, video.id, viewer.id, 60)

    detail = await video_service.get_public_video(session, video.id)
    assert detail["view_count"] == 2

    pending = await make_video(session, creator, title="Hidden", approved=False)
    with pytest.raises(NotFoundError):
        await video_service.record_watch(session, pending.id, viewer.id, 10)


async def test_feed_over_http(client, session):
    creator = await make_user(session, role=UserRole.CREATOR, email="h@example.com", name="Birsa Films")
    for i in range(3):
        await make_video(session, creator, title=f"Episode {i}")
    hidden = await make_video(session, creator, title="Pending", approved=False)

    res = await client.get("/videos", params={"limit": 2})
    assert res.status_code == 200
    body = res.json()
    assert body["total"] == 2
    assert body["hasMore"] is True
    card = body["videos"][0]
    assert card["title"] == "Episode 2"
    assert card["creator"]["name"] == "Birsa Films"
    assert card["ageRating"] == "U"
    assert "videoUrl" not in card

    res = await client.get("/videos", params={"limit": 2, "offset": 2})
    assert res.json()["hasMore"] is False

    res = await client.get("/videos", params={"limit": 500})
    assert res.status_code == 400

    res = await client.get(f"/videos/{hidden.id}")
    assert res.status_code == 404
    assert res.json() == {"error": "Video not found"}


async def test_watch_endpoint(client, session):
    creator = await make_user(session, role=UserRole.CREATOR, email="we@example.com")
    viewer = await make_user(session, email="wv@example.com")
    video = await make_video(session, creator)

    res = await client.post(f"/videos/{video.id}/watch", json={"userId": viewer.id, "watchTime": 300}, headers=auth_headers(viewer))
    assert res.status_code == 201
    assert res.json()["watchTime"] == 300

    res = await client.get(f"/videos/{video.id}")
    assert res.json()["viewCount"] == 1
    assert res.json()["videoUrl"] == "/uploads/video.mp4"


async def test_search_matches_wildcards_literally(session):
    creator = await make_user(session, role=UserRole.CREATOR, email="lit@example.com")
    await make_video(session, creator, title="100% Jharkhandi")
    await make_video(session, creator, title="Nagpuri Geet")
    await make_video(session, creator, title="folk_mix")

    cards, _ = await video_service.list_public(session, search="%")
    assert [c["title"] for c in cards] == ["100% Jharkhandi"]

    cards, _ = await video_service.list_public(session, search="_")
    assert [c["title"] for c in cards] == ["folk_mix"]

    cards, _ = await video_service.list_public(session, search="Nag%Geet")
    assert cards == []
