"""Tests for review API endpoints."""

from httpx import AsyncClient
from sqlalchemy import select

from moviematic.models import Review
from moviematic.utils.security import create_access_token


def headers_for(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


async def post_review(client: AsyncClient, headers: dict, movie_id: int, rating: int = 4, text="Good"):
    return await client.post(
        "/api/reviews",
        json={"movie_id": movie_id, "rating": rating, "review_text": text},
        headers=headers,
    )


class TestCreateReview:
    """Tests for creating reviews."""

    async def test_create_review(
        self, client: AsyncClient, user, user_headers: dict, create_movie
    ) -> None:
        movie = await create_movie()

        response = await post_review(client, user_headers, movie.id, rating=5, text="Loved it")

        assert response.status_code == 201
        data = response.json()
        assert data["movie_id"] == movie.id
        assert data["user_id"] == user.id
        assert data["rating"] == 5
        assert data["user"] == {"id": user.id, "first_name": "Test", "last_name": "User"}

    async def test_second_review_is_rejected(
        self, client: AsyncClient, user_headers: dict, create_movie, session_factory
    ) -> None:
        movie = await create_movie()

        first = await post_review(client, user_headers, movie.id)
        second = await post_review(client, user_headers, movie.id, rating=1)

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["code"] == "ALREADY_REVIEWED"
        async with session_factory() as session:
            reviews = (await session.execute(select(Review))).scalars().all()
        assert len(reviews) == 1
        assert reviews[0].rating == 4

    async def test_review_unknown_movie(self, client: AsyncClient, user_headers: dict) -> None:
        response = await post_review(client, user_headers, 9999)

        assert response.status_code == 404

    async def test_rating_out_of_range(
        self, client: AsyncClient, user_headers: dict, create_movie
    ) -> None:
        movie = await create_movie()

        response = await post_review(client, user_headers, movie.id, rating=6)

        assert response.status_code == 400

    async def test_requires_login(self, client: AsyncClient, create_movie) -> None:
        movie = await create_movie()

        response = await post_review(client, {}, movie.id)

        assert response.status_code == 401

    async def test_review_again_after_delete(
        self, client: AsyncClient, user_headers: dict, create_movie, session_factory
    ) -> None:
        movie = await create_movie()
        first = await post_review(client, user_headers, movie.id, rating=2, text="Meh")
        await client.delete(f"/api/reviews/{first.json()['id']}", headers=user_headers)

        again = await post_review(client, user_headers, movie.id, rating=5, text="Grew on me")

        assert again.status_code == 201
        assert again.json()["rating"] == 5
        async with session_factory() as session:
            reviews = (await session.execute(select(Review))).scalars().all()
        assert len(reviews) == 1
        assert reviews[0].is_active is True


class TestListReviews:
    """Tests for review listings and stats."""

    async def test_movie_reviews_newest_first(
        self, client: AsyncClient, create_user, create_movie
    ) -> None:
        movie = await create_movie()
        alice = await create_user(email="alice@example.com", first_name="Alice")
        bob = await create_user(email="bob@example.com", first_name="Bob")
        await post_review(client, headers_for(alice), movie.id, text="First")
        await post_review(client, headers_for(bob), movie.id, text="Second")

        response = await client.get(f"/api/reviews/movie/{movie.id}")

        assert response.status_code == 200
        assert [r["review_text"] for r in response.json()] == ["Second", "First"]
        assert response.json()[0]["user"]["first_name"] == "Bob"

    async def test_stats(self, client: AsyncClient, create_user, create_movie) -> None:
        movie = await create_movie()
        for i, rating in enumerate([5, 5, 4, 3]):
            reviewer = await create_user(email=f"reviewer{i}@example.com")
            await post_review(client, headers_for(reviewer), movie.id, rating=rating)

        response = await client.get(f"/api/reviews/movie/{movie.id}/stats")

        assert response.status_code == 200
        assert response.json() == {
            "average_rating": 4.3,
            "total_reviews": 4,
            "rating_distribution": {"1": 0, "2": 0, "3": 1, "4": 1, "5": 2},
        }

    async def test_stats_without_reviews(self, client: AsyncClient, create_movie) -> None:
        movie = await create_movie()

        response = await client.get(f"/api/reviews/movie/{movie.id}/stats")

        assert response.json()["average_rating"] == 0
        assert response.json()["total_reviews"] == 0

    async def test_own_review_for_movie(
        self, client: AsyncClient, user, user_headers: dict, create_movie
    ) -> None:
        movie = await create_movie()
        other = await create_movie(title="Other")
        await post_review(client, user_headers, movie.id)

        found = await client.get(f"/api/reviews/movie/{movie.id}/user/{user.id}", headers=user_headers)
        missing = await client.get(
            f"/api/reviews/movie/{other.id}/user/{user.id}", headers=user_headers
        )

        assert found.json()["movie_id"] == movie.id
        assert missing.status_code == 200
        assert missing.json() is None

    async def test_cannot_read_someone_elses_reviews(
        self, client: AsyncClient, user_headers: dict, create_user
    ) -> None:
        other = await create_user(email="other@example.com")

        response = await client.get(f"/api/reviews/user/{other.id}", headers=user_headers)

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    async def test_user_reviews_include_movie(
        self, client: AsyncClient, user, user_headers: dict, create_movie, admin_headers: dict
    ) -> None:
        kept = await create_movie(title="Kept")
        deleted = await create_movie(title="Deleted")
        await post_review(client, user_headers, kept.id)
        await post_review(client, user_headers, deleted.id)
        await client.delete(f"/api/movies/{deleted.id}", headers=admin_headers)

        response = await client.get(f"/api/reviews/user/{user.id}", headers=user_headers)

        movies = {r["movie_id"]: r["movie"] for r in response.json()}
        assert movies[kept.id]["title"] == "Kept"
        assert movies[deleted.id] is None


class TestUpdateAndDeleteReview:
    """Tests for editing and soft-deleting reviews."""

    async def test_update_review(
        self, client: AsyncClient, user_headers: dict, create_movie
    ) -> None:
        movie = await create_movie()
        created = await post_review(client, user_headers, movie.id, rating=2)

        response = await client.put(
            f"/api/reviews/{created.json()['id']}",
            json={"rating": 3, "review_text": "Better on rewatch"},
            headers=user_headers,
        )

        assert response.status_code == 200
        assert response.json()["rating"] == 3
        assert response.json()["review_text"] == "Better on rewatch"

    async def test_cannot_update_someone_elses_review(
        self, client: AsyncClient, user_headers: dict, create_user, create_movie
    ) -> None:
        movie = await create_movie()
        other = await create_user(email="other@example.com")
        created = await post_review(client, headers_for(other), movie.id)

        response = await client.put(
            f"/api/reviews/{created.json()['id']}",
            json={"rating": 1, "review_text": "Hijacked"},
            headers=user_headers,
        )

        assert response.status_code == 404

    async def test_soft_delete(
        self, client: AsyncClient, user_headers: dict, create_user, create_movie, session_factory
    ) -> None:
        movie = await create_movie()
        other = await create_user(email="other@example.com")
        await post_review(client, headers_for(other), movie.id, rating=2)
        created = await post_review(client, user_headers, movie.id, rating=5)
        review_id = created.json()["id"]

        response = await client.delete(f"/api/reviews/{review_id}", headers=user_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Review deleted successfully"

        listing = await client.get(f"/api/reviews/movie/{movie.id}")
        listed_ids = [r["id"] for r in listing.json()]
        assert len(listed_ids) == 1
        assert review_id not in listed_ids

        stats = await client.get(f"/api/reviews/movie/{movie.id}/stats")
        assert stats.json()["average_rating"] == 2.0
        assert stats.json()["total_reviews"] == 1

        async with session_factory() as session:
            stored = await session.get(Review, review_id)
        assert stored is not None
        assert stored.is_active is False

    async def test_deleted_review_cannot_be_deleted_again(
        self, client: AsyncClient, user_headers: dict, create_movie
    ) -> None:
        movie = await create_movie()
        created = await post_review(client, user_headers, movie.id)
        url = f"/api/reviews/{created.json()['id']}"

        await client.delete(url, headers=user_headers)
        response = await client.delete(url, headers=user_headers)

        assert response.status_code == 404
