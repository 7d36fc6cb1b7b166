"""
Tests for the video feed, publishing and editing
"""

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from videotube.models.video import Video
from videotube.models.watch_history import WatchHistoryEntry


class TestVideoFeed:

    async def test_feed_only_lists_published_videos(self, client: AsyncClient, make_user, make_video):
        owner = await make_user("owner")
        await make_video(owner, title="Public")
        await make_video(owner, title="Draft", is_published=False)

        response = await client.get("/api/v1/videos")

        assert response.status_code == 200
        page = response.json()["data"]
        assert page["totalDocs"] == 1
        assert page["docs"][0]["title"] == "Public"
        assert page["docs"][0]["owner"]["username"] == "owner"

    async def test_page_past_the_end(self, client: AsyncClient, make_user, make_video):
        owner = await make_user("owner")
        for i in range(3):
            await make_video(owner, title=f"Video {i}")

        response = await client.get("/api/v1/videos?page=5&limit=2")

        page = response.json()["data"]
        assert page["docs"] == []
        assert page["totalDocs"] == 3
        assert page["totalPages"] == 2
        assert page["hasNextPage"] is False

    async def test_invalid_page_values_fall_back(self, client: AsyncClient, make_user, make_video):
        owner = await make_user("owner")
        await make_video(owner)

        response = await client.get("/api/v1/videos?page=abc&limit=-1")

        page = response.json()["data"]
        assert page["page"] == 1
        assert page["limit"] == 10
        assert len(page["docs"]) == 1

    async def test_search_and_sort(self, client: AsyncClient, make_user, make_video):
        owner = await make_user("owner")
        await make_video(owner, title="Cat compilation", views=5)
        await make_video(owner, title="Cat tricks", views=50)
        await make_video(owner, title="Dog tricks", views=500)

        response = await client.get("/api/v1/videos?query=cat&sortBy=views&sortType=desc")

        titles = [video["title"] for video in response.json()["data"]["docs"]]
        assert titles == ["Cat tricks", "Cat compilation"]

        ascending = await client.get("/api/v1/videos?sortBy=views")
        views = [video["views"] for video in ascending.json()["data"]["docs"]]
        assert views == [5, 50, 500]

    async def test_filter_by_owner(self, client: AsyncClient, make_user, make_video):
        alice = await make_user("alice")
        bob = await make_user("bob")
        await make_video(alice, title="Alice")
        await make_video(bob, title="Bob")

        response = await client.get(f"/api/v1/videos?userId={bob.id}")

        docs = response.json()["data"]["docs"]
        assert [video["title"] for video in docs] == ["Bob"]

    async def test_filter_by_unknown_owner(self, client: AsyncClient):
        response = await client.get("/api/v1/videos?userId=00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404


class TestPublishVideo:

    async def test_publish(self, client: AsyncClient, make_user, count_rows, headers_for, fake_storage):
        owner = await make_user("owner")

        response = await client.post(
            "/api/v1/videos",
            data={"title": "My first video", "description": "Hello world"},
            files={
                "videoFile": ("clip.mp4", b"fake video bytes", "video/mp4"),
                "thumbnail": ("thumb.png", b"fake image bytes", "image/png"),
            },
            headers=headers_for(owner),
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["title"] == "My first video"
        assert data["duration"] == 42
        assert data["isPublished"] is True
        assert data["videoFile"].startswith("https://cdn.videotube.test/videos/")
        assert len(fake_storage.uploaded) == 2
        assert await count_rows(Video, Video.owner_id == owner.id) == 1

    async def test_publish_requires_thumbnail(self, client: AsyncClient, make_user, count_rows, headers_for):
        owner = await make_user("owner")

        response = await client.post(
            "/api/v1/videos",
            data={"title": "My first video", "description": "Hello world"},
            files={"videoFile": ("clip.mp4", b"fake video bytes", "video/mp4")},
            headers=headers_for(owner),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Thumbnail is required"
        assert await count_rows(Video) == 0

    async def test_publish_requires_title(self, client: AsyncClient, make_user, headers_for):
        owner = await make_user("owner")

        response = await client.post(
            "/api/v1/videos",
            data={"description": "Hello world"},
            files={
                "videoFile": ("clip.mp4", b"fake video bytes", "video/mp4"),
                "thumbnail": ("thumb.png", b"fake image bytes", "image/png"),
            },
            headers=headers_for(owner),
        )

        assert response.status_code == 400


class TestVideoDetail:

    async def test_detail_with_viewer_state(self, client: AsyncClient, make_user, make_video, make_like, headers_for):
        owner = await make_user("owner")
        viewer = await make_user("viewer")
        video = await make_video(owner)
        await make_like(viewer, video=video)
        await client.post(f"/api/v1/subscriptions/c/{owner.id}", headers=headers_for(viewer))

        response = await client.get(f"/api/v1/videos/{video.id}", headers=headers_for(viewer))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["likesCount"] == 1
        assert data["subscribersCount"] == 1
        assert data["isLiked"] is True
        assert data["isSubscribed"] is True

    async def test_anonymous_detail(self, client: AsyncClient, make_user, make_video):
        owner = await make_user("owner")
        video = await make_video(owner)

        response = await client.get(f"/api/v1/videos/{video.id}")

        data = response.json()["data"]
        assert data["isLiked"] is False
        assert data["owner"]["_id"] == str(owner.id)

    async def test_unpublished_video_is_hidden(self, client: AsyncClient, make_user, make_video):
        owner = await make_user("owner")
        video = await make_video(owner, is_published=False)

        response = await client.get(f"/api/v1/videos/{video.id}")

        assert response.status_code == 404

    async def test_malformed_id(self, client: AsyncClient):
        response = await client.get("/api/v1/videos/not-a-uuid")
        assert response.status_code == 400

    async def test_view_increments_and_records_history(
        self, client: AsyncClient, make_user, make_video, count_rows, headers_for
    ):
        owner = await make_user("owner")
        viewer = await make_user("viewer")
        video = await make_video(owner, views=7)

        await client.post(f"/api/v1/videos/{video.id}/view", headers=headers_for(viewer))
        await client.post(f"/api/v1/videos/{video.id}/view", headers=headers_for(viewer))

        assert await count_rows(Video, Video.id == video.id, Video.views == 9) == 1
        assert await count_rows(WatchHistoryEntry, WatchHistoryEntry.user_id == viewer.id) == 1

        history = await client.get("/api/v1/users/history", headers=headers_for(viewer))
        assert [item["_id"] for item in history.json()["data"]] == [str(video.id)]


class TestEditVideo:

    async def test_update_title(self, client: AsyncClient, make_user, make_video, headers_for):
        owner = await make_user("owner")
        video = await make_video(owner, title="Old")

        response = await client.patch(
            f"/api/v1/videos/{video.id}",
            data={"title": "New"},
            headers=headers_for(owner),
        )

        assert response.status_code == 200
        assert response.json()["data"]["title"] == "New"

    async def test_update_requires_a_field(self, client: AsyncClient, make_user, make_video, headers_for):
        owner = await make_user("owner")
        video = await make_video(owner)

        response = await client.patch(f"/api/v1/videos/{video.id}", data={}, headers=headers_for(owner))

        assert response.status_code == 400

    async def test_update_replaces_thumbnail(self, client: AsyncClient, make_user, make_video, headers_for, fake_storage):
        owner = await make_user("owner")
        video = await make_video(owner)

        response = await client.patch(
            f"/api/v1/videos/{video.id}",
            files={"thumbnail": ("new.png", b"fake image bytes", "image/png")},
            headers=headers_for(owner),
        )

        assert response.status_code == 200
        assert video.thumbnail_public_id in fake_storage.deleted

    async def test_failed_save_removes_new_thumbnail(
        self, client: AsyncClient, make_user, make_video, headers_for, fake_storage, monkeypatch
    ):
        owner = await make_user("owner")
        video = await make_video(owner)

        async def failing_commit(self):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(AsyncSession, "commit", failing_commit)

        response = await client.patch(
            f"/api/v1/videos/{video.id}",
            files={"thumbnail": ("new.png", b"fake image bytes", "image/png")},
            headers=headers_for(owner),
        )

        assert response.status_code == 500
        new_thumbnail = fake_storage.uploaded[-1]
        assert fake_storage.deleted == [new_thumbnail]

    async def test_non_owner_cannot_update(self, client: AsyncClient, make_user, make_video, headers_for):
        owner = await make_user("owner")
        intruder = await make_user("intruder")
        video = await make_video(owner)

        response = await client.patch(
            f"/api/v1/videos/{video.id}",
            data={"title": "Hijacked"},
            headers=headers_for(intruder),
        )

        assert response.status_code == 403

    async def test_toggle_publish(self, client: AsyncClient, make_user, make_video, headers_for):
        owner = await make_user("owner")
        intruder = await make_user("intruder")
        video = await make_video(owner)

        forbidden = await client.patch(f"/api/v1/videos/toggle/publish/{video.id}", headers=headers_for(intruder))
        assert forbidden.status_code == 403

        response = await client.patch(f"/api/v1/videos/toggle/publish/{video.id}", headers=headers_for(owner))
        assert response.json()["data"] == {"isPublished": False}
