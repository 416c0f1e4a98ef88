from app.models.post import Post, PostStatus
from app.models.user import Role, User

from tests.conftest import login


def _role_of(db_session, user_id):
    db_session.expire_all()
    return db_session.get(User, user_id).role


def test_users_page_lists_everyone(client, admin, author, reader):
    login(client, admin)
    resp = client.get("/admin/users")
    assert resp.status_code == 200
    for user in (admin, author, reader):
        assert user.email in resp.text
    assert "$2b$" not in resp.text


def test_users_page_requires_admin(client, author):
    resp = client.get("/admin/users", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/auth/login"

    login(client, author)
    assert client.get("/admin/users").status_code == 403


def test_change_role(client, admin, author, db_session):
    login(client, admin)
    resp = client.post(
        "/admin/users/role",
        data={"user_id": author.id, "new_role": "reader"},
        follow_redirects=False,
    )
    assert resp.status_code == 303
    assert resp.headers["location"].startswith("/admin/users?success=")
    assert _role_of(db_session, author.id) == Role.READER


def test_change_role_rejects_unknown_role(client, admin, author, db_session):
    login(client, admin)
    resp = client.post("/admin/users/role", data={"user_id": author.id, "new_role": "superuser"})
    assert resp.status_code == 400
    assert _role_of(db_session, author.id) == Role.AUTHOR


def test_change_role_missing_user(client, admin):
    login(client, admin)
    resp = client.post("/admin/users/role", data={"user_id": 999, "new_role": "reader"})
    assert resp.status_code == 404


def test_admin_cannot_change_own_role(client, admin, db_session):
    login(client, admin)
    resp = client.post("/admin/users/role", data={"user_id": admin.id, "new_role": "reader"})
    assert resp.status_code == 403
    assert "your own role" in resp.text
    assert _role_of(db_session, admin.id) == Role.ADMIN


def test_non_admin_cannot_change_roles(client, author, other_author, db_session):
    login(client, author)
    resp = client.post("/admin/users/role", data={"user_id": author.id, "new_role": "admin"})
    assert resp.status_code == 403
    assert _role_of(db_session, author.id) == Role.AUTHOR


def test_admin_cannot_delete_self(client, admin, db_session):
    login(client, admin)
    resp = client.post(f"/admin/users/{admin.id}/delete")
    assert resp.status_code == 403
    db_session.expire_all()
    assert db_session.get(User, admin.id) is not None


def test_delete_user_cascades_posts(client, admin, author, other_author, db_session, make_post):
    make_post(author, title="Draft")
    make_post(author, title="Live", status=PostStatus.PUBLISHED)
    survivor = make_post(other_author, title="Survivor")
    author_id = author.id

    login(client, admin)
    resp = client.post(f"/admin/users/{author_id}/delete", follow_redirects=False)
    assert resp.status_code == 303

    db_session.expire_all()
    assert db_session.get(User, author_id) is None
    assert db_session.query(Post).filter(Post.author_id == author_id).count() == 0
    assert db_session.get(Post, survivor.id) is not None


def test_delete_missing_user(client, admin):
    login(client, admin)
    assert client.post("/admin/users/999/delete").status_code == 404


def test_demoted_author_loses_create_access(client, admin, author):
    login(client, author)
    assert client.get("/blog/create").status_code == 200
    author_cookie = client.cookies["token"]

    login(client, admin)
    client.post("/admin/users/role", data={"user_id": author.id, "new_role": "reader"})

    # the author's existing token is still valid; the role is re-read on every request
    client.cookies.clear()
    client.cookies.set("token", author_cookie)
    assert client.get("/blog/create").status_code == 403


def test_deleted_user_session_ends(client, admin, author):
    login(client, author)
    author_cookie = client.cookies["token"]

    login(client, admin)
    client.post(f"/admin/users/{author.id}/delete")

    client.cookies.clear()
    client.cookies.set("token", author_cookie)
    resp = client.get("/auth/dashboard", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/auth/login"
