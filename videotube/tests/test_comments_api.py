"""
Tests for comments on videos and community posts
"""

from uuid import UUID

from httpx import AsyncClient

from videotube.models.comment import Comment
from videotube.models.like import Like
from videotube.models.notification import Notification


class TestVideoComments:

    async def test_add_comment_notifies_owner(self, client: AsyncClient, make_user, make_video, count_rows, headers_for):
        owner = await make_user("owner")
        fan = await make_user("fan")
        video = await make_video(owner)

        response = await client.post(
            f"/api/v1/comments/{video.id}",
            json={"content": "Loved it"},
            headers=headers_for(fan)
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["content"] == "Loved it"
        assert data["owner"]["username"] == "fan"
        assert data["video"] == str(video.id)
        assert await count_rows(
            Notification,
            Notification.recipient_id == owner.id,
            Notification.type == "comment",
            Notification.comment_id == UUID(data["_id"]),
        ) == 1

    async def test_blank_comment_rejected(self, client: AsyncClient, make_user, make_video, headers_for):
        owner = await make_user("owner")
        video = await make_video(owner)

        response = await client.post(f"/api/v1/comments/{video.id}", json={"content": "   "}, headers=headers_for(owner))

        assert response.status_code == 400
        assert response.json()["message"] == "Comment content is required"

    async def test_comment_on_missing_video(self, client: AsyncClient, make_user, headers_for):
        fan = await make_user("fan")
        response = await client.post(
            "/api/v1/comments/00000000-0000-0000-0000-000000000000",
            json={"content": "Hello?"},
            headers=headers_for(fan)
        )
        assert response.status_code == 404

    async def test_list_comments_with_like_counts(
        self, client: AsyncClient, make_user, make_video, make_comment, make_like
    ):
        owner = await make_user("owner")
        fan = await make_user("fan")
        video = await make_video(owner)
        liked = await make_comment(fan, "liked one", video=video)
        await make_comment(fan, "plain one", video=video)
        await make_like(owner, comment=liked)

        response = await client.get(f"/api/v1/comments/{video.id}?limit=10")

        page = response.json()["data"]
        assert page["totalDocs"] == 2
        counts = {doc["content"]: doc["likesCount"] for doc in page["docs"]}
        assert counts == {"liked one": 1, "plain one": 0}


class TestPostComments:

    async def test_comment_on_post(self, client: AsyncClient, make_user, make_post, count_rows, headers_for):
        owner = await make_user("owner")
        fan = await make_user("fan")
        post = await make_post(owner)

        response = await client.post(f"/api/v1/comments/t/{post.id}", json={"content": "Agreed"}, headers=headers_for(fan))

        assert response.status_code == 201
        assert response.json()["data"]["tweet"] == str(post.id)
        listing = await client.get(f"/api/v1/comments/t/{post.id}")
        assert listing.json()["data"]["totalDocs"] == 1
        assert await count_rows(Notification, Notification.type == "comment") == 1


class TestEditComments:

    async def test_update_own_comment(self, client: AsyncClient, make_user, make_video, make_comment, headers_for):
        owner = await make_user("owner")
        video = await make_video(owner)
        comment = await make_comment(owner, "typo", video=video)

        response = await client.patch(
            f"/api/v1/comments/c/{comment.id}",
            json={"content": "fixed"},
            headers=headers_for(owner)
        )

        assert response.status_code == 200
        assert response.json()["data"]["content"] == "fixed"

    async def test_cannot_edit_or_delete_others_comment(
        self, client: AsyncClient, make_user, make_video, make_comment, count_rows, headers_for
    ):
        owner = await make_user("owner")
        intruder = await make_user("intruder")
        video = await make_video(owner)
        comment = await make_comment(owner, "mine", video=video)

        updated = await client.patch(
            f"/api/v1/comments/c/{comment.id}", json={"content": "yours now"}, headers=headers_for(intruder)
        )
        deleted = await client.delete(f"/api/v1/comments/c/{comment.id}", headers=headers_for(intruder))

        assert updated.status_code == 403
        assert deleted.status_code == 403
        assert await count_rows(Comment, Comment.id == comment.id) == 1

    async def test_delete_removes_comment_likes(
        self, client: AsyncClient, make_user, make_video, make_comment, make_like, count_rows, headers_for
    ):
        owner = await make_user("owner")
        fan = await make_user("fan")
        video = await make_video(owner)
        comment = await make_comment(owner, "bye", video=video)
        await make_like(fan, comment=comment)

        response = await client.delete(f"/api/v1/comments/c/{comment.id}", headers=headers_for(owner))

        assert response.status_code == 200
        assert await count_rows(Comment, Comment.id == comment.id) == 0
        assert await count_rows(Like, Like.comment_id == comment.id) == 0
