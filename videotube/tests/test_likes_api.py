"""
Tests for like toggles
"""

from httpx import AsyncClient

from videotube.models.like import Like
from videotube.models.notification import Notification


class TestLikeToggle:

    async def test_toggle_twice_restores_state(self, client: AsyncClient, make_user, make_video, count_rows, headers_for):
        owner = await make_user("owner")
        fan = await make_user("fan")
        video = await make_video(owner)
        url = f"/api/v1/likes/toggle/v/{video.id}"

        first = await client.post(url, headers=headers_for(fan))
        assert first.status_code == 200
        assert first.json()["data"] == {"isLiked": True}
        assert await count_rows(Like, Like.video_id == video.id) == 1

        second = await client.post(url, headers=headers_for(fan))
        assert second.status_code == 200
        assert second.json()["data"] == {"isLiked": False}
        assert await count_rows(Like, Like.video_id == video.id) == 0

    async def test_like_notifies_owner(self, client: AsyncClient, make_user, make_video, count_rows, headers_for):
        owner = await make_user("owner")
        fan = await make_user("fan", full_name="Big Fan")
        video = await make_video(owner, title="Sunset")

        await client.post(f"/api/v1/likes/toggle/v/{video.id}", headers=headers_for(fan))

        assert await count_rows(
            Notification,
            Notification.recipient_id == owner.id,
            Notification.sender_id == fan.id,
            Notification.type == "like",
            Notification.video_id == video.id,
        ) == 1

    async def test_unlike_does_not_notify(self, client: AsyncClient, make_user, make_video, make_like, count_rows, headers_for):
        owner = await make_user("owner")
        fan = await make_user("fan")
        video = await make_video(owner)
        await make_like(fan, video=video)

        await client.post(f"/api/v1/likes/toggle/v/{video.id}", headers=headers_for(fan))

        assert await count_rows(Notification) == 0

    async def test_liking_own_video_sends_no_notification(self, client: AsyncClient, make_user, make_video, count_rows, headers_for):
        owner = await make_user("owner")
        video = await make_video(owner)

        response = await client.post(f"/api/v1/likes/toggle/v/{video.id}", headers=headers_for(owner))

        assert response.json()["data"]["isLiked"] is True
        assert await count_rows(Notification) == 0

    async def test_like_missing_video(self, client: AsyncClient, make_user, headers_for):
        fan = await make_user("fan")
        response = await client.post(
            "/api/v1/likes/toggle/v/00000000-0000-0000-0000-000000000000",
            headers=headers_for(fan)
        )
        assert response.status_code == 404

    async def test_toggle_comment_like(self, client: AsyncClient, make_user, make_video, make_comment, count_rows, headers_for):
        owner = await make_user("owner")
        fan = await make_user("fan")
        video = await make_video(owner)
        comment = await make_comment(owner, video=video)

        response = await client.post(f"/api/v1/likes/toggle/c/{comment.id}", headers=headers_for(fan))

        assert response.json()["data"]["isLiked"] is True
        assert await count_rows(Like, Like.comment_id == comment.id) == 1

    async def test_toggle_post_like_notifies(self, client: AsyncClient, make_user, make_post, count_rows, headers_for):
        owner = await make_user("owner")
        fan = await make_user("fan")
        post = await make_post(owner)

        response = await client.post(f"/api/v1/likes/toggle/t/{post.id}", headers=headers_for(fan))

        assert response.json()["data"]["isLiked"] is True
        assert await count_rows(Notification, Notification.recipient_id == owner.id, Notification.type == "like") == 1

    async def test_requires_auth(self, client: AsyncClient, make_user, make_video):
        owner = await make_user("owner")
        video = await make_video(owner)
        response = await client.post(f"/api/v1/likes/toggle/v/{video.id}")
        assert response.status_code == 401


class TestLikedVideos:

    async def test_liked_videos_newest_first(self, client: AsyncClient, make_user, make_video, headers_for):
        owner = await make_user("owner")
        fan = await make_user("fan")
        first = await make_video(owner, title="First")
        second = await make_video(owner, title="Second")

        await client.post(f"/api/v1/likes/toggle/v/{first.id}", headers=headers_for(fan))
        await client.post(f"/api/v1/likes/toggle/v/{second.id}", headers=headers_for(fan))

        response = await client.get("/api/v1/likes/videos", headers=headers_for(fan))

        assert response.status_code == 200
        videos = response.json()["data"]
        assert {video["title"] for video in videos} == {"First", "Second"}
        assert videos[0]["owner"]["username"] == "owner"
        assert "likedAt" in videos[0]

    async def test_video_likers(self, client: AsyncClient, make_user, make_video, make_like):
        owner = await make_user("owner")
        fan = await make_user("fan")
        video = await make_video(owner)
        await make_like(fan, video=video)

        response = await client.get(f"/api/v1/likes/v/{video.id}")

        assert response.status_code == 200
        likers = response.json()["data"]
        assert len(likers) == 1
        assert likers[0]["user"]["username"] == "fan"
