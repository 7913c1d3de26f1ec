"""
Tests for comment submission and moderation
"""


def _comment(project_id, **fields):
    data = {
        "project_id": project_id,
        "author_name": "Ada",
        "author_email": "ada@example.com",
        "content": "Great work!",
    }
    data.update(fields)
    return data


def test_comment_on_missing_project_is_not_found(client):
    response = client.post("/api/comments", json=_comment(99999))

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_new_comment_is_always_unapproved(client, make_project):
    project = make_project()

    response = client.post("/api/comments", json=_comment(project["id"], approved=True, rating=5))

    assert response.status_code == 201
    comment = response.json()["data"]["comment"]
    assert comment["approved"] is False
    assert comment["rating"] == 5


def test_missing_fields_are_bad_request(client, make_project):
    project = make_project()

    response = client.post("/api/comments", json={"project_id": project["id"], "author_name": "Ada"})

    assert response.status_code == 400
    fields = {f["field"] for f in response.json()["data"]["fields"]}
    assert {"author_email", "content"} <= fields


def test_rating_out_of_range_is_bad_request(client, make_project):
    project = make_project()

    for rating in (0, 6):
        response = client.post("/api/comments", json=_comment(project["id"], rating=rating))
        assert response.status_code == 400


def test_invalid_email_is_bad_request(client, make_project):
    project = make_project()

    response = client.post("/api/comments", json=_comment(project["id"], author_email="not-an-email"))

    assert response.status_code == 400


def test_public_listing_only_shows_approved(client, admin_headers, make_project):
    project = make_project()
    comment = client.post("/api/comments", json=_comment(project["id"])).json()["data"]["comment"]

    listed = client.get(f"/api/comments/project/{project['id']}").json()["data"]["comments"]
    assert listed == []

    response = client.patch(f"/api/comments/{comment['id']}/approve", json={"approved": True},
                            headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Comment approved"

    listed = client.get(f"/api/comments/project/{project['id']}").json()["data"]["comments"]
    assert [c["id"] for c in listed] == [comment["id"]]
    assert all(c["approved"] for c in listed)

    response = client.patch(f"/api/comments/{comment['id']}/approve", json={"approved": False},
                            headers=admin_headers)
    assert response.json()["message"] == "Comment rejected"
    assert client.get(f"/api/comments/project/{project['id']}").json()["data"]["comments"] == []


def test_public_listing_newest_first(client, admin_headers, make_project):
    project = make_project()
    ids = []
    for text in ("first", "second", "third"):
        created = client.post("/api/comments", json=_comment(project["id"], content=text)).json()
        ids.append(created["data"]["comment"]["id"])
        client.patch(f"/api/comments/{ids[-1]}/approve", json={"approved": True}, headers=admin_headers)

    listed = client.get(f"/api/comments/project/{project['id']}").json()["data"]["comments"]

    assert [c["id"] for c in listed] == list(reversed(ids))


def test_admin_listing_includes_project_title_and_filters(client, admin_headers, make_project):
    project = make_project(title="Museum")
    pending = client.post("/api/comments", json=_comment(project["id"])).json()["data"]["comment"]
    approved = client.post("/api/comments", json=_comment(project["id"])).json()["data"]["comment"]
    client.patch(f"/api/comments/{approved['id']}/approve", json={"approved": True}, headers=admin_headers)

    everything = client.get("/api/comments/admin", headers=admin_headers).json()["data"]["comments"]
    assert [c["id"] for c in everything] == [approved["id"], pending["id"]]
    assert all(c["project_title"] == "Museum" for c in everything)

    only_pending = client.get("/api/comments/admin?approved=false", headers=admin_headers).json()
    assert [c["id"] for c in only_pending["data"]["comments"]] == [pending["id"]]

    only_approved = client.get("/api/comments/admin?approved=true", headers=admin_headers).json()
    assert [c["id"] for c in only_approved["data"]["comments"]] == [approved["id"]]


def test_moderation_requires_admin(client, make_project):
    project = make_project()
    comment = client.post("/api/comments", json=_comment(project["id"])).json()["data"]["comment"]

    assert client.get("/api/comments/admin").status_code == 401
    assert client.patch(f"/api/comments/{comment['id']}/approve", json={"approved": True}).status_code == 401
    assert client.delete(f"/api/comments/{comment['id']}").status_code == 401


def test_moderating_missing_comment_is_not_found(client, admin_headers):
    assert client.patch("/api/comments/99999/approve", json={"approved": True},
                        headers=admin_headers).status_code == 404
    assert client.delete("/api/comments/99999", headers=admin_headers).status_code == 404


def test_delete_comment(client, admin_headers, make_project):
    project = make_project()
    comment = client.post("/api/comments", json=_comment(project["id"])).json()["data"]["comment"]

    response = client.delete(f"/api/comments/{comment['id']}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["data"]["deleted"]["id"] == comment["id"]
    assert client.get("/api/comments/admin", headers=admin_headers).json()["data"]["comments"] == []
