"""
Tests for channel subscriptions
"""

from httpx import AsyncClient

from videotube.models.notification import Notification
from videotube.models.subscription import Subscription


class TestSubscriptionToggle:

    async def test_subscribe_then_unsubscribe(self, client: AsyncClient, make_user, count_rows, headers_for):
        channel = await make_user("channel")
        viewer = await make_user("viewer")
        url = f"/api/v1/subscriptions/c/{channel.id}"

        subscribed = await client.post(url, headers=headers_for(viewer))
        assert subscribed.status_code == 201
        assert subscribed.json()["data"] == {"subscribed": True}
        assert await count_rows(Subscription) == 1

        unsubscribed = await client.post(url, headers=headers_for(viewer))
        assert unsubscribed.status_code == 200
        assert unsubscribed.json()["data"] == {"subscribed": False}
        assert await count_rows(Subscription) == 0

    async def test_subscribe_notifies_channel(self, client: AsyncClient, make_user, count_rows, headers_for):
        channel = await make_user("channel")
        viewer = await make_user("viewer")

        await client.post(f"/api/v1/subscriptions/c/{channel.id}", headers=headers_for(viewer))

        assert await count_rows(
            Notification,
            Notification.recipient_id == channel.id,
            Notification.sender_id == viewer.id,
            Notification.type == "subscribe",
        ) == 1

    async def test_cannot_subscribe_to_self(self, client: AsyncClient, make_user, count_rows, headers_for):
        channel = await make_user("channel")

        response = await client.post(f"/api/v1/subscriptions/c/{channel.id}", headers=headers_for(channel))

        assert response.status_code == 400
        assert response.json()["message"] == "You cannot subscribe to your own channel"
        assert await count_rows(Subscription) == 0
        assert await count_rows(Notification) == 0

    async def test_unknown_channel(self, client: AsyncClient, make_user, headers_for):
        viewer = await make_user("viewer")
        response = await client.post(
            "/api/v1/subscriptions/c/00000000-0000-0000-0000-000000000000",
            headers=headers_for(viewer)
        )
        assert response.status_code == 404


class TestSubscriptionLists:

    async def test_channel_subscribers_paginated(self, client: AsyncClient, make_user, headers_for):
        channel = await make_user("channel")
        for i in range(3):
            viewer = await make_user(f"viewer{i}")
            await client.post(f"/api/v1/subscriptions/c/{channel.id}", headers=headers_for(viewer))

        response = await client.get(f"/api/v1/subscriptions/c/{channel.id}?page=1&limit=2")

        assert response.status_code == 200
        page = response.json()["data"]
        assert page["totalDocs"] == 3
        assert len(page["docs"]) == 2
        assert page["hasNextPage"] is True
        assert page["docs"][0]["subscriber"]["username"].startswith("viewer")

    async def test_subscribed_channels(self, client: AsyncClient, make_user, headers_for):
        viewer = await make_user("viewer")
        channel = await make_user("channel")
        await client.post(f"/api/v1/subscriptions/c/{channel.id}", headers=headers_for(viewer))

        response = await client.get(f"/api/v1/subscriptions/u/{viewer.id}")

        page = response.json()["data"]
        assert page["totalDocs"] == 1
        assert page["docs"][0]["channel"]["_id"] == str(channel.id)
