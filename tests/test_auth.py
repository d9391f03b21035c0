"""
Integration tests for signup, login, logout and session attachment.
"""
from extensions import db, mail
from models import User


def test_login_page_renders(client):
    response = client.get("/login")

    assert response.status_code == 200
    assert b'name="email"' in response.data
    assert b'name="password"' in response.data


def test_signup_creates_user_and_sends_email(app, client):
    with mail.record_messages() as outbox:
        response = client.post("/signup", data={
            "email": "New@Example.com",
            "password": "secret123",
            "confirm_password": "secret123",
        })

    assert response.status_code == 302
    assert response.headers["Location"] == "/login"

    with app.app_context():
        user = User.query.filter_by(email="new@example.com").first()
        assert user is not None
        assert user.password_hash != "secret123"
        assert user.check_password("secret123")
        assert user.cart_items == []

    assert len(outbox) == 1
    assert outbox[0].subject == "Signup succeeded!"
    assert outbox[0].recipients == ["new@example.com"]


def test_signup_rejects_existing_email(client, make_user):
    make_user(email="taken@example.com")

    response = client.post("/signup", data={
        "email": "taken@example.com",
        "password": "secret123",
        "confirm_password": "secret123",
    })

    assert response.status_code == 422
    assert b"E-Mail exists already, please pick a different one." in response.data
    # old input is kept
    assert b'value="taken@example.com"' in response.data


def test_signup_rejects_mismatched_passwords(client):
    response = client.post("/signup", data={
        "email": "someone@example.com",
        "password": "secret123",
        "confirm_password": "secret124",
    })

    assert response.status_code == 422
    assert b"Passwords have to match!" in response.data


def test_signup_rejects_weak_password(app, client):
    response = client.post("/signup", data={
        "email": "someone@example.com",
        "password": "abc!",
        "confirm_password": "abc!",
    })

    assert response.status_code == 422
    assert b"at least 5 characters" in response.data
    with app.app_context():
        assert User.query.count() == 0


def test_login_success_marks_session_authenticated(client, make_user, login):
    user_id = make_user()

    response = login()

    assert response.status_code == 302
    assert response.headers["Location"] == "/"
    with client.session_transaction() as sess:
        assert sess["is_logged_in"] is True
        assert sess["_user_id"] == str(user_id)


def test_login_unknown_email_is_generic(client):
    response = client.post("/login", data={"email": "ghost@example.com", "password": "secret123"})

    assert response.status_code == 422
    assert b"Invalid email or password." in response.data


def test_login_wrong_password_is_generic(client, make_user):
    make_user()

    response = client.post("/login", data={"email": "shopper@example.com", "password": "wrong1234"})

    assert response.status_code == 422
    assert b"Invalid email or password." in response.data


def test_login_validates_email_format(client):
    response = client.post("/login", data={"email": "not-an-email", "password": "secret123"})

    assert response.status_code == 422
    assert b"Please enter a valid email address." in response.data


def count_sessions(app):
    with app.app_context():
        return db.session.execute(db.text("SELECT COUNT(*) FROM sessions")).scalar()


def test_logout_destroys_session(app, client, make_user, login):
    make_user()
    assert count_sessions(app) == 0

    login()
    assert count_sessions(app) == 1
    assert client.get("/cart").status_code == 200

    response = client.post("/logout")

    assert response.status_code == 302
    assert response.headers["Location"] == "/"
    assert count_sessions(app) == 0
    response = client.get("/cart")
    assert response.status_code == 302
    assert response.headers["Location"].startswith("/login")


def test_logout_rejects_get(client, make_user, login):
    make_user()
    login()

    assert client.get("/logout").status_code == 405
    # vẫn còn đăng nhập
    assert client.get("/cart").status_code == 200


def test_signup_rejects_non_ascii_password(app, client):
    response = client.post("/signup", data={
        "email": "someone@example.com",
        "password": "ééééé",
        "confirm_password": "ééééé",
    })

    assert response.status_code == 422
    with app.app_context():
        assert User.query.count() == 0


def test_session_user_reloaded_on_each_request(app, client, make_user, login):
    user_id = make_user()
    login()

    with app.app_context():
        db.session.delete(db.session.get(User, user_id))
        db.session.commit()

    # user đã bị xoá -> request tiếp tục như khách
    response = client.get("/cart")
    assert response.status_code == 302
    assert response.headers["Location"].startswith("/login")


def test_login_required_flashes_message(client):
    response = client.get("/orders", follow_redirects=True)

    assert response.status_code == 200
    assert b"Please log in to access this page." in response.data
