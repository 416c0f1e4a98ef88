import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import *  # noqa: register all models

from fastapi.testclient import TestClient

PASSWORD = "correct-horse"


@pytest.fixture
def db_engine():
    # Use StaticPool to keep the same in-memory db across connections
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    Session = sessionmaker(bind=db_engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def client(db_engine):
    Session = sessionmaker(bind=db_engine)

    def _override():
        session = Session()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Factory creating users straight in the database."""
    from app.models.user import Role, User
    from app.security import hash_password

    def _make(username: str, role: Role = Role.AUTHOR, email: str | None = None) -> User:
        user = User(
            username=username,
            email=email or f"{username}@example.com",
            password_hash=hash_password(PASSWORD),
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def admin(make_user):
    from app.models.user import Role

    return make_user("root", Role.ADMIN)


@pytest.fixture
def author(make_user):
    return make_user("alice")


@pytest.fixture
def other_author(make_user):
    return make_user("bob")


@pytest.fixture
def reader(make_user):
    from app.models.user import Role

    return make_user("carol", Role.READER)


@pytest.fixture
def make_post(db_session):
    from app.models.post import Post, PostStatus

    def _make(author, title="A post", content="Body text", status=PostStatus.DRAFT) -> Post:
        post = Post(title=title, content=content, author_id=author.id, status=status)
        db_session.add(post)
        db_session.commit()
        db_session.refresh(post)
        return post

    return _make


def login(client, user, password: str = PASSWORD):
    """Log ``client`` in as ``user``, dropping any previous session cookie."""
    client.cookies.clear()
    resp = client.post(
        "/auth/login",
        data={"email": user.email, "password": password},
        follow_redirects=False,
    )
    assert resp.status_code == 303, resp.text
    return resp

