"""
Tests for community posts
"""

from httpx import AsyncClient

from videotube.models.comment import Comment
from videotube.models.like import Like
from videotube.models.post import Post


class TestTweets:

    async def test_create_and_list(self, client: AsyncClient, make_user, headers_for):
        owner = await make_user("owner")

        created = await client.post("/api/v1/tweets", json={"content": "New video Friday"}, headers=headers_for(owner))
        assert created.status_code == 201
        assert created.json()["data"]["owner"]["username"] == "owner"

        listing = await client.get(f"/api/v1/tweets/user/{owner.id}")
        page = listing.json()["data"]
        assert page["totalDocs"] == 1
        assert page["docs"][0]["content"] == "New video Friday"
        assert page["docs"][0]["likesCount"] == 0

    async def test_blank_content(self, client: AsyncClient, make_user, headers_for):
        owner = await make_user("owner")
        response = await client.post("/api/v1/tweets", json={"content": ""}, headers=headers_for(owner))
        assert response.status_code == 400
        assert response.json()["message"] == "Tweet content is required"

    async def test_update_is_owner_only(self, client: AsyncClient, make_user, make_post, headers_for):
        owner = await make_user("owner")
        intruder = await make_user("intruder")
        post = await make_post(owner)

        forbidden = await client.patch(f"/api/v1/tweets/{post.id}", json={"content": "mine"}, headers=headers_for(intruder))
        assert forbidden.status_code == 403

        response = await client.patch(f"/api/v1/tweets/{post.id}", json={"content": "edited"}, headers=headers_for(owner))
        assert response.json()["data"]["content"] == "edited"

    async def test_delete_removes_comments_and_likes(
        self, client: AsyncClient, make_user, make_post, make_comment, make_like, count_rows, headers_for
    ):
        owner = await make_user("owner")
        fan = await make_user("fan")
        post = await make_post(owner)
        comment = await make_comment(fan, "reply", post=post)
        await make_like(fan, post=post)
        await make_like(owner, comment=comment)

        response = await client.delete(f"/api/v1/tweets/{post.id}", headers=headers_for(owner))

        assert response.status_code == 200
        assert await count_rows(Post) == 0
        assert await count_rows(Comment) == 0
        assert await count_rows(Like) == 0
