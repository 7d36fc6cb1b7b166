"""
Tests for notifications: side-effect creation and the recipient's inbox
"""

from httpx import AsyncClient

from videotube.models.notification import Notification, NotificationTypeEnum
from videotube.services.notification_service import NotificationService


class TestCreateNotification:

    async def test_self_notification_is_suppressed(self, make_user, count_rows):
        user = await make_user("solo")

        result = await NotificationService.create_notification(
            recipient_id=user.id,
            sender_id=user.id,
            notification_type=NotificationTypeEnum.LIKE,
            message="You liked your own video",
        )

        assert result is None
        assert await count_rows(Notification) == 0

    async def test_creates_unread_notification(self, make_user, count_rows):
        recipient = await make_user("recipient")
        sender = await make_user("sender")

        result = await NotificationService.create_notification(
            recipient_id=recipient.id,
            sender_id=sender.id,
            notification_type=NotificationTypeEnum.SUBSCRIBE,
            message="Sender subscribed to your channel",
        )

        assert result is not None
        assert await count_rows(Notification, Notification.is_read.is_(False)) == 1

    async def test_failure_is_swallowed(self, make_user, monkeypatch):
        recipient = await make_user("recipient")
        sender = await make_user("sender")

        def broken_session():
            raise RuntimeError("database unavailable")

        monkeypatch.setattr("videotube.db.database.get_db_session", broken_session)

        result = await NotificationService.create_notification(
            recipient_id=recipient.id,
            sender_id=sender.id,
            notification_type=NotificationTypeEnum.LIKE,
            message="Sender liked your video",
        )

        assert result is None

    async def test_comment_on_own_video_sends_nothing(self, client: AsyncClient, make_user, make_video, count_rows, headers_for):
        owner = await make_user("owner")
        video = await make_video(owner)

        response = await client.post(
            f"/api/v1/comments/{video.id}",
            json={"content": "First!"},
            headers=headers_for(owner)
        )

        assert response.status_code == 201
        assert await count_rows(Notification) == 0


class TestNotificationInbox:

    async def _seed(self, client, make_user, make_video, headers_for):
        owner = await make_user("owner")
        video = await make_video(owner, title="Launch")
        for i in range(3):
            fan = await make_user(f"fan{i}")
            await client.post(f"/api/v1/likes/toggle/v/{video.id}", headers=headers_for(fan))
        return owner, video

    async def test_list_newest_first_with_unread_count(self, client: AsyncClient, make_user, make_video, headers_for):
        owner, video = await self._seed(client, make_user, make_video, headers_for)

        response = await client.get("/api/v1/notifications", headers=headers_for(owner))

        assert response.status_code == 200
        page = response.json()["data"]
        assert page["totalDocs"] == 3
        assert page["limit"] == 20
        assert page["unreadCount"] == 3
        first = page["docs"][0]
        assert first["type"] == "like"
        assert first["isRead"] is False
        assert first["sender"]["username"].startswith("fan")
        assert first["video"]["title"] == "Launch"

    async def test_mark_one_and_all_read(self, client: AsyncClient, make_user, make_video, headers_for):
        owner, _ = await self._seed(client, make_user, make_video, headers_for)
        headers = headers_for(owner)
        docs = (await client.get("/api/v1/notifications", headers=headers)).json()["data"]["docs"]

        marked = await client.patch(f"/api/v1/notifications/{docs[0]['_id']}/read", headers=headers)
        assert marked.status_code == 200
        assert marked.json()["data"]["isRead"] is True

        count = await client.get("/api/v1/notifications/unread-count", headers=headers)
        assert count.json()["data"]["unreadCount"] == 2

        all_read = await client.patch("/api/v1/notifications/read-all", headers=headers)
        assert all_read.json()["data"]["modifiedCount"] == 2

        count = await client.get("/api/v1/notifications/unread-count", headers=headers)
        assert count.json()["data"]["unreadCount"] == 0

    async def test_cannot_touch_someone_elses_notification(
        self, client: AsyncClient, make_user, make_video, count_rows, headers_for
    ):
        owner, _ = await self._seed(client, make_user, make_video, headers_for)
        stranger = await make_user("stranger")
        docs = (await client.get("/api/v1/notifications", headers=headers_for(owner))).json()["data"]["docs"]

        read = await client.patch(f"/api/v1/notifications/{docs[0]['_id']}/read", headers=headers_for(stranger))
        deleted = await client.delete(f"/api/v1/notifications/{docs[0]['_id']}", headers=headers_for(stranger))

        assert read.status_code == 404
        assert deleted.status_code == 404
        assert await count_rows(Notification) == 3

    async def test_delete_own_notification(self, client: AsyncClient, make_user, make_video, count_rows, headers_for):
        owner, _ = await self._seed(client, make_user, make_video, headers_for)
        docs = (await client.get("/api/v1/notifications", headers=headers_for(owner))).json()["data"]["docs"]

        response = await client.delete(f"/api/v1/notifications/{docs[0]['_id']}", headers=headers_for(owner))

        assert response.status_code == 200
        assert await count_rows(Notification) == 2
