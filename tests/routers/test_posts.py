from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from postdesk import dependencies as deps
from postdesk.errors import (
    MalformedInputError,
    PartialWriteError,
    PostConflictError,
    PostNotFoundError,
    PostWriteError,
)
from postdesk.routers import posts
from postdesk.schemas.blog import PostWriteResult
from postdesk.services.posts_service import PostsService
from tests.conftest import FakePostsService, FakeRepo, FakeSiteBuilder

WRITE_RESULT = PostWriteResult(
    message="Post created",
    filename="2024-03-01-Hello.md",
    slug="Hello",
    path="2024/03/01/Hello/",
)

BODY = {
    "title": "Hello",
    "date": "2024-03-01T00:00:00.000Z",
    "tags": ["a"],
    "categories": "c",
    "body": "text",
}


def make_app(service, site_builder=None):
    app = FastAPI()
    builder = site_builder or FakeSiteBuilder()
    app.dependency_overrides[deps.get_posts_service] = lambda: service
    app.dependency_overrides[deps.get_site_builder] = lambda: builder
    app.include_router(posts.router)
    return app


def test_list_posts_returns_service_result():
    fake_posts = [
        {"filename": "2024-02-02-b.md", "slug": "b", "title": "B", "date": "2024-02-02"},
        {"filename": "2024-01-01-a.md", "slug": "a", "title": "A", "date": "2024-01-01"},
    ]
    client = TestClient(make_app(FakePostsService(list_posts_return=fake_posts)))

    res = client.get("/api/posts")

    assert res.status_code == 200
    body = res.json()
    assert [p["slug"] for p in body] == ["b", "a"]
    assert body[0]["tags"] == []


def test_list_posts_passes_through_http_exception():
    service = FakePostsService(list_posts_return=HTTPException(418, "teapot"))
    client = TestClient(make_app(service))

    res = client.get("/api/posts")

    assert res.status_code == 418
    assert res.json()["detail"] == "teapot"


def test_list_posts_returns_500_on_unexpected_error():
    client = TestClient(make_app(FakePostsService(list_posts_return=RuntimeError("boom"))))

    res = client.get("/api/posts")

    assert res.status_code == 500
    assert res.json()["detail"] == "Failed to retrieve posts"


def test_get_post_returns_404_when_missing():
    service = FakePostsService(get_post_return=PostNotFoundError("missing"))
    client = TestClient(make_app(service))

    res = client.get("/api/posts/missing")

    assert res.status_code == 404


def test_get_post_returns_500_on_unexpected_error():
    service = FakePostsService(get_post_return=RuntimeError("boom"))
    client = TestClient(make_app(service))

    res = client.get("/api/posts/any")

    assert res.status_code == 500
    assert res.json()["detail"] == "Failed to retrieve post"


def test_create_post_returns_201_and_schedules_regeneration():
    service = FakePostsService(write_return=WRITE_RESULT)
    builder = FakeSiteBuilder()
    client = TestClient(make_app(service, builder))

    res = client.post("/api/posts", json=BODY)

    assert res.status_code == 201
    assert res.json()["filename"] == "2024-03-01-Hello.md"
    assert res.json()["path"] == "2024/03/01/Hello/"
    assert builder.calls == 1


def test_create_post_succeeds_even_when_regeneration_fails():
    service = FakePostsService(write_return=WRITE_RESULT)
    builder = FakeSiteBuilder(result=False)
    client = TestClient(make_app(service, builder))

    res = client.post("/api/posts", json=BODY)

    assert res.status_code == 201
    assert builder.calls == 1


def test_create_post_rejects_malformed_input_without_regenerating():
    service = FakePostsService(write_return=MalformedInputError("title is required"))
    builder = FakeSiteBuilder()
    client = TestClient(make_app(service, builder))

    res = client.post("/api/posts", json={"body": "x"})

    assert res.status_code == 400
    assert res.json()["detail"] == "title is required"
    assert builder.calls == 0


def test_create_post_write_failure_is_500():
    service = FakePostsService(write_return=PostWriteError("Failed to write x.md"))
    client = TestClient(make_app(service))

    res = client.post("/api/posts", json=BODY)

    assert res.status_code == 500
    assert res.json()["detail"] == "Failed to write x.md"


def test_update_post_passes_slug_and_payload():
    service = FakePostsService(write_return=WRITE_RESULT)
    builder = FakeSiteBuilder()
    client = TestClient(make_app(service, builder))

    res = client.put("/api/posts/Hello", json=BODY)

    assert res.status_code == 200
    _, slug, payload = service.calls[0]
    assert slug == "Hello"
    assert payload.tags == ["a"]
    assert builder.calls == 1


def test_update_post_not_found():
    service = FakePostsService(write_return=PostNotFoundError("zzz"))
    client = TestClient(make_app(service))

    res = client.put("/api/posts/zzz", json=BODY)

    assert res.status_code == 404


def test_update_post_partial_write_has_distinct_detail():
    error = PartialWriteError("2024-old.md", "2024-new.md", "read-only")
    client = TestClient(make_app(FakePostsService(write_return=error)))

    res = client.put("/api/posts/old", json=BODY)

    assert res.status_code == 500
    assert "2024-new.md" in res.json()["detail"]
    assert "2024-old.md" in res.json()["detail"]


def test_update_post_conflict_is_409_without_regenerating():
    service = FakePostsService(write_return=PostConflictError("2024-03-01-foo.md"))
    builder = FakeSiteBuilder()
    client = TestClient(make_app(service, builder))

    res = client.put("/api/posts/bar", json=BODY)

    assert res.status_code == 409
    assert "2024-03-01-foo.md" in res.json()["detail"]
    assert builder.calls == 0


def test_delete_post_returns_filename():
    service = FakePostsService(delete_return="2024-01-01-foo.md")
    builder = FakeSiteBuilder()
    client = TestClient(make_app(service, builder))

    res = client.delete("/api/posts/foo")

    assert res.status_code == 200
    assert res.json() == {"message": "Post deleted", "filename": "2024-01-01-foo.md"}
    assert builder.calls == 1


def test_delete_post_not_found():
    client = TestClient(make_app(FakePostsService(delete_return=PostNotFoundError("x"))))

    res = client.delete("/api/posts/x")

    assert res.status_code == 404


def test_end_to_end_with_real_service():
    repo = FakeRepo()
    builder = FakeSiteBuilder()
    client = TestClient(make_app(PostsService(repo=repo), builder))

    assert client.post("/api/posts", json=BODY).status_code == 201
    assert client.get("/api/posts/Hello").json()["body"] == "text"

    res = client.put("/api/posts/Hello", json={**BODY, "title": "Hello Again"})
    assert res.json()["previousFilename"] == "2024-03-01-Hello.md"
    assert list(repo.files) == ["2024-03-01-Hello-Again.md"]

    assert client.delete("/api/posts/Again").status_code == 200
    assert client.get("/api/posts").json() == []
    assert builder.calls == 3


def test_real_service_rejects_slash_dates_with_400():
    repo = FakeRepo()
    builder = FakeSiteBuilder()
    client = TestClient(make_app(PostsService(repo=repo), builder))

    res = client.post("/api/posts", json={**BODY, "date": "2024/03/01 10:00"})

    assert res.status_code == 400
    assert res.json()["detail"] == "date must start with YYYY-MM-DD"
    assert repo.files == {}
    assert builder.calls == 0


def test_real_service_rename_onto_another_post_is_409():
    repo = FakeRepo()
    client = TestClient(make_app(PostsService(repo=repo)))
    client.post("/api/posts", json={**BODY, "title": "foo", "body": "FOO BODY"})
    client.post("/api/posts", json={**BODY, "title": "bar", "body": "BAR BODY"})

    res = client.put("/api/posts/bar", json={**BODY, "title": "foo"})

    assert res.status_code == 409
    assert client.get("/api/posts/foo").json()["body"] == "FOO BODY"
    assert client.get("/api/posts/bar").json()["body"] == "BAR BODY"
