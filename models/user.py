from datetime import datetime
from decimal import Decimal

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from extensions import db
from .cart_item import CartItem


class User(db.Model, UserMixin):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    # Token đặt lại mật khẩu (dùng 1 lần, hết hạn sau 1 giờ)
    reset_token = db.Column(db.String(64), nullable=True, index=True)
    reset_token_expiration = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())

    cart_items = db.relationship(
        "CartItem",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="CartItem.id",
    )
    orders = db.relationship("Order", back_populates="user", lazy=True, order_by="Order.created_at.desc()")
    products = db.relationship("Product", back_populates="owner", lazy=True)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    # -----------------------------------------------------------------
    # Reset token
    def issue_reset_token(self, token, ttl):
        self.reset_token = token
        self.reset_token_expiration = datetime.utcnow() + ttl

    def clear_reset_token(self):
        self.reset_token = None
        self.reset_token_expiration = None

    @classmethod
    def find_by_reset_token(cls, token, user_id=None):
        """Tìm user theo token còn hạn (kèm user_id nếu có)"""
        if not token:
            return None
        query = cls.query.filter(
            cls.reset_token == token,
            cls.reset_token_expiration > datetime.utcnow(),
        )
        if user_id is not None:
            query = query.filter(cls.id == user_id)
        return query.first()

    # -----------------------------------------------------------------
    # Cart
    def add_to_cart(self, product):
        for item in self.cart_items:
            if item.product_id == product.id:
                item.quantity += 1
                return item
        item = CartItem(product=product, quantity=1)
        self.cart_items.append(item)
        return item

    def remove_from_cart(self, product_id):
        for item in list(self.cart_items):
            if item.product_id == product_id:
                self.cart_items.remove(item)

    def clear_cart(self):
        self.cart_items.clear()

    @property
    def cart_total(self):
        return sum((item.subtotal for item in self.cart_items), Decimal("0"))
