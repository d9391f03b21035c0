from datetime import datetime
from decimal import Decimal

from extensions import db


class Order(db.Model):
    __tablename__ = "orders"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    email = db.Column(db.String(120), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    user = db.relationship("User", back_populates="orders")
    items = db.relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    @classmethod
    def from_cart(cls, user):
        """Chụp lại giỏ hàng hiện tại thành một đơn hàng mới"""
        # Đơn hàng chưa nằm trong session -> tắt autoflush khi nạp product
        with db.session.no_autoflush:
            order = cls(user=user, email=user.email)
            for item in user.cart_items:
                order.items.append(OrderItem(
                    product=item.product,
                    title=item.product.title,
                    price=item.product.price,
                    quantity=item.quantity,
                ))
        return order

    @property
    def total(self):
        return sum((item.subtotal for item in self.items), Decimal("0"))


class OrderItem(db.Model):
    __tablename__ = "order_items"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id", ondelete="SET NULL"), nullable=True)

    title = db.Column(db.String(120), nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)

    order = db.relationship("Order", back_populates="items")
    product = db.relationship("Product", back_populates="order_items")

    @property
    def subtotal(self):
        return self.price * self.quantity
