import io
import os
from decimal import Decimal

import pytest

from app import create_app
from config import TestingConfig
from extensions import db
from models import User, Product

# 1x1 PNG
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00\x1f\x15\xc4\x89"
    b"\x00\x00\x00\rIDATx\xdacd`\xf8_\x0f\x00\x02\x87\x01\x80\xeb\x47\xba\x92\x00\x00\x00\x00IEND\xaeB`\x82"
)


@pytest.fixture(scope="session")
def app(tmp_path_factory):
    upload_folder = str(tmp_path_factory.mktemp("images"))

    class Config(TestingConfig):
        UPLOAD_FOLDER = upload_folder

    return create_app(Config)


@pytest.fixture(autouse=True)
def database(app):
    with app.app_context():
        db.create_all()
    yield
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(email="shopper@example.com", password="secret123"):
        with app.app_context():
            user = User(email=email)
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.id
    return _make_user


@pytest.fixture
def make_product(app):
    counter = {"n": 0}

    def _make_product(owner_id, title="Ceramic Mug", price="12.50", description="A sturdy mug for morning coffee."):
        counter["n"] += 1
        filename = f"test-{counter['n']}-product.png"
        with open(os.path.join(app.config["UPLOAD_FOLDER"], filename), "wb") as f:
            f.write(PNG_BYTES)

        with app.app_context():
            product = Product(
                title=title,
                price=Decimal(price),
                description=description,
                image_url=f"images/{filename}",
                user_id=owner_id,
            )
            db.session.add(product)
            db.session.commit()
            return product.id
    return _make_product


@pytest.fixture
def login(client):
    def _login(email="shopper@example.com", password="secret123"):
        return client.post("/login", data={"email": email, "password": password})
    return _login


@pytest.fixture
def png_upload():
    def _png_upload(name="mug.png"):
        return (io.BytesIO(PNG_BYTES), name)
    return _png_upload
