"""Post ownership and visibility tests."""

from cms.models.enums import Role


def create_post(client, headers, **data):
    data.setdefault("title", "Hello World")
    response = client.post("/api/v1/posts", json=data, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_post(client, author_headers):
    """Test the creator owns the post and tags are attached by name."""
    post = create_post(client, author_headers, tags=["Python", "python", "Web"])
    assert post["author_id"] == author_headers.user_id
    assert post["slug"] == "hello-world"
    assert post["status"] == "draft"
    assert post["published_at"] is None
    assert [tag["slug"] for tag in post["tags"]] == ["python", "web"]


def test_publish_sets_published_at(client, author_headers):
    post = create_post(client, author_headers, status="published")
    assert post["published_at"] is not None


def test_post_slugs_have_their_own_scope(client, author_headers, editor_headers):
    """Test post slugs are unique among posts only."""
    client.post("/api/v1/categories", json={"name": "Hello World"}, headers=editor_headers)

    first = create_post(client, author_headers)
    second = create_post(client, author_headers)
    assert first["slug"] == "hello-world"
    assert second["slug"] == "hello-world-2"


def test_create_with_missing_category(client, author_headers):
    response = client.post(
        "/api/v1/posts", json={"title": "Lost", "category_id": 9999}, headers=author_headers
    )
    assert response.status_code == 400


def test_author_edits_own_post(client, author_headers):
    post = create_post(client, author_headers)

    response = client.put(
        f"/api/v1/posts/{post['id']}",
        json={"content": "Body", "tags": ["fresh"]},
        headers=author_headers,
    )
    assert response.status_code == 200
    assert response.json()["content"] == "Body"
    assert [tag["slug"] for tag in response.json()["tags"]] == ["fresh"]


def test_author_cannot_edit_others_post(client, make_user):
    """Test authors are limited to their own posts."""
    owner = make_user(Role.AUTHOR)
    other = make_user(Role.AUTHOR)
    post = create_post(client, owner, title="Mine")

    response = client.put(
        f"/api/v1/posts/{post['id']}", json={"title": "Theirs"}, headers=other
    )
    assert response.status_code == 403
    assert client.delete(f"/api/v1/posts/{post['id']}", headers=other).status_code == 403

    response = client.get(f"/api/v1/posts/{post['id']}", headers=owner)
    assert response.json()["title"] == "Mine"


def test_rejected_edit_creates_no_tags(client, make_user):
    """Test a denied edit leaves no new tags behind."""
    owner = make_user(Role.AUTHOR)
    other = make_user(Role.AUTHOR)
    post = create_post(client, owner)

    client.put(f"/api/v1/posts/{post['id']}", json={"tags": ["sneaky"]}, headers=other)
    assert client.get("/api/v1/tags/slug/sneaky").status_code == 404


def test_only_owner_or_admin_edits_post(client, author_headers, editor_headers, admin_headers):
    """Test editors are treated like any non-owner while admins may edit any post."""
    post = create_post(client, author_headers)

    response = client.put(
        f"/api/v1/posts/{post['id']}", json={"title": "By Editor"}, headers=editor_headers
    )
    assert response.status_code == 403
    assert client.delete(f"/api/v1/posts/{post['id']}", headers=editor_headers).status_code == 403
    unchanged = client.get(f"/api/v1/posts/{post['id']}", headers=author_headers).json()
    assert unchanged["title"] == "Hello World"

    response = client.put(
        f"/api/v1/posts/{post['id']}", json={"title": "Edited"}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["slug"] == "edited"
    assert response.json()["author_id"] == author_headers.user_id

    response = client.delete(f"/api/v1/posts/{post['id']}", headers=admin_headers)
    assert response.status_code == 204
    assert client.get(f"/api/v1/posts/{post['id']}", headers=admin_headers).status_code == 404


def test_drafts_hidden_from_anonymous(client, author_headers, make_user):
    """Test drafts are only visible to users allowed to edit them."""
    draft = create_post(client, author_headers, title="Secret")
    published = create_post(client, author_headers, title="Public", status="published")
    stranger = make_user(Role.AUTHOR)

    assert client.get(f"/api/v1/posts/{draft['id']}").status_code == 404
    assert client.get("/api/v1/posts/slug/secret").status_code == 404
    assert client.get(f"/api/v1/posts/{draft['id']}", headers=stranger).status_code == 404
    assert client.get(f"/api/v1/posts/{draft['id']}", headers=author_headers).status_code == 200

    assert client.get(f"/api/v1/posts/{published['id']}").status_code == 200
    assert client.get("/api/v1/posts/slug/public").json()["id"] == published["id"]


def test_create_requires_login(client):
    assert client.post("/api/v1/posts", json={"title": "Anon"}).status_code == 401
