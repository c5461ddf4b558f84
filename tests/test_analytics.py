import csv
import io

from conftest import auth_headers, make_user, make_video
from streamhub.models.subscription_model import SubscriptionPlan
from streamhub.models.user_model import UserRole
from streamhub.models.video_model import Review
from streamhub.services import analytics as analytics_service
from streamhub.services import subscriptions as subscription_service
from streamhub.services import videos as video_service


async def _seed(session):
    admin = await make_user(session, role=UserRole.ADMIN, email="admin@example.com", name="Admin")
    creator = await make_user(session, role=UserRole.CREATOR, email="creator@example.com", name="Creator")
    other_creator = await make_user(session, role=UserRole.CREATOR, email="other@example.com")
    viewer = await make_user(session, email="viewer@example.com", name="Viewer")

    mine = await make_video(session, creator, title="Mine", duration=1800)
    theirs = await make_video(session, other_creator, title="Theirs")
    await make_video(session, creator, title="Unapproved", approved=False)

    await video_service.record_watch(session, mine.id, viewer.id, 600)
    await video_service.record_watch(session, mine.id, viewer.id, 300)
    await video_service.record_watch(session, theirs.id, viewer.id, 50)
    session.add(Review(user_id=viewer.id, video_id=mine.id, rating=5))
    await session.commit()

    await subscription_service.purchase(session, viewer.id, SubscriptionPlan.MONTHLY)
    return admin, creator, viewer


async def test_admin_rollup(session):
    await _seed(session)

    data = await analytics_service.build(session, "ADMIN", 0, "30d")
    assert data["overview"] == {
        "totalUsers": 4,
        "totalCreators": 2,
        "totalVideos": 2,
        "totalRevenue": 299,
        "activeSubscriptions": 1,
    }
    assert data["window"]["newUsers"] == 4
    assert data["window"]["revenue"] == 299
    assert data["recentTransactions"][0]["user"] == "Viewer"
    assert data["recentTransactions"][0]["plan"] == "MONTHLY"
    assert data["timeRange"] == "30d"


async def test_creator_rollup_is_scoped_to_own_videos(session):
    _, creator, _ = await _seed(session)

    data = await analytics_service.build(session, "CREATOR", creator.id, "7d")
    assert data["overview"] == {
        "totalViews": 2,
        "totalWatchTime": 900,
        "revenue": 299,
        "videosCount": 1,
    }
    assert data["window"]["views"] == 2
    assert data["window"]["watchTime"] == 900


async def test_user_rollup(session):
    _, _, viewer = await _seed(session)

    data = await analytics_service.build(session, "USER", viewer.id, "24h")
    assert data["overview"] == {"totalWatched": 3, "totalWatchTime": 950, "contentLiked": 1}
    assert data["window"]["watched"] == 3
    assert data["recentActivity"][0]["title"] == "Theirs"
    assert {"title": "Mine", "duration": 30} == {
        k: v for k, v in data["recentActivity"][-1].items() if k != "watchedAt"
    }


async def test_analytics_endpoint_scopes(client, session):
    admin, creator, viewer = await _seed(session)

    res = await client.get("/analytics", params={"userRole": "ADMIN"}, headers=auth_headers(admin))
    assert res.status_code == 200
    assert res.json()["role"] == "ADMIN"
    assert res.json()["timeRange"] == "7d"

    res = await client.get("/analytics", params={"userRole": "ADMIN"}, headers=auth_headers(creator))
    assert res.status_code == 403

    res = await client.get("/analytics", params={"userRole": "CREATOR"}, headers=auth_headers(viewer))
    assert res.status_code == 403

    res = await client.get(
        "/analytics", params={"userRole": "USER", "userId": viewer.id}, headers=auth_headers(creator)
    )
    assert res.status_code == 403

    res = await client.get(
        "/analytics", params={"userRole": "USER", "userId": viewer.id}, headers=auth_headers(admin)
    )
    assert res.status_code == 200
    assert res.json()["overview"]["totalWatched"] == 3

    res = await client.get("/analytics", headers=auth_headers(viewer))
    assert res.json()["role"] == "USER"

    res = await client.get("/analytics", params={"timeRange": "5y"}, headers=auth_headers(viewer))
    assert res.status_code == 400

    res = await client.get("/analytics")
    assert res.status_code == 401


async def test_csv_export(client, session):
    _, creator, _ = await _seed(session)

    res = await client.get(
        "/analytics/export",
        params={"userRole": "CREATOR", "timeRange": "30d"},
        headers=auth_headers(creator),
    )
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    disposition = res.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="creator-analytics-30d-')

    rows = list(csv.reader(io.StringIO(res.text)))
    assert rows[0] == ["Metric", "Value"]
    values = dict(rows[1:])
    assert values["totalViews"] == "2"
    assert values["videosCount"] == "1"
    assert "window.start" in values

    res = await client.get(
        "/analytics/export", params={"format": "pdf"}, headers=auth_headers(creator)
    )
    assert res.status_code == 400
