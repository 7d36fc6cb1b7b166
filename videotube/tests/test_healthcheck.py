from httpx import AsyncClient


class TestHealthcheck:

    async def test_healthcheck(self, client: AsyncClient):
        response = await client.get("/api/v1/healthcheck")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] == {"status": "OK"}
