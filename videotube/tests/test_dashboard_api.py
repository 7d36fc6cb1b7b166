"""
Tests for the channel dashboard
"""

from httpx import AsyncClient


class TestDashboard:

    async def test_channel_stats(
        self, client: AsyncClient, make_user, make_video, make_comment, make_like, headers_for
    ):
        owner = await make_user("owner")
        fan = await make_user("fan")
        other = await make_user("other")
        first = await make_video(owner, views=10)
        second = await make_video(owner, views=5, is_published=False)
        elsewhere = await make_video(other, views=1000)
        await make_like(fan, video=first)
        await make_like(other, video=second)
        await make_like(fan, video=elsewhere)
        await make_comment(fan, video=first)
        await make_comment(fan, video=elsewhere)
        await client.post(f"/api/v1/subscriptions/c/{owner.id}", headers=headers_for(fan))

        response = await client.get("/api/v1/dashboard/stats", headers=headers_for(owner))

        assert response.status_code == 200
        assert response.json()["data"] == {
            "totalVideos": 2,
            "totalViews": 15,
            "totalSubscribers": 1,
            "totalLikes": 2,
            "totalComments": 1,
        }

    async def test_empty_channel_stats(self, client: AsyncClient, make_user, headers_for):
        owner = await make_user("owner")

        response = await client.get("/api/v1/dashboard/stats", headers=headers_for(owner))

        data = response.json()["data"]
        assert data["totalVideos"] == 0
        assert data["totalViews"] == 0

    async def test_channel_videos_include_drafts(self, client: AsyncClient, make_user, make_video, make_like, headers_for):
        owner = await make_user("owner")
        fan = await make_user("fan")
        public = await make_video(owner, title="Public")
        await make_video(owner, title="Draft", is_published=False)
        await make_like(fan, video=public)

        response = await client.get("/api/v1/dashboard/videos?sortBy=title", headers=headers_for(owner))

        page = response.json()["data"]
        assert page["totalDocs"] == 2
        assert [doc["title"] for doc in page["docs"]] == ["Draft", "Public"]
        assert [doc["likesCount"] for doc in page["docs"]] == [0, 1]

    async def test_requires_auth(self, client: AsyncClient):
        response = await client.get("/api/v1/dashboard/stats")
        assert response.status_code == 401
