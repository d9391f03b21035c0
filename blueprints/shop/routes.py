from flask import Blueprint, render_template, redirect, url_for, flash, request, current_app, send_file, send_from_directory, abort
from flask_login import login_required, current_user
from extensions import db
from mailer import send_email
from models.product import Product
from models.order import Order
from sqlalchemy.exc import SQLAlchemyError
from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from io import BytesIO
from math import ceil

shop_bp = Blueprint("shop", __name__, template_folder="../../templates/shop")

#-------------------------------------------------------
# Phân trang
def paginate(query, page, per_page):
    total_items = query.count()
    total_pages = max(ceil(total_items / per_page), 1)
    page = min(max(page, 1), total_pages)
    items = query.offset((page - 1) * per_page).limit(per_page).all()

    return items, {
        "current_page": page,
        "has_previous_page": page > 1,
        "previous_page": page - 1,
        "has_next_page": page < total_pages,
        "next_page": page + 1,
        "last_page": total_pages,
        "total_items": total_items,
    }

def catalogue(template, title):
    page = request.args.get("page", 1, type=int)
    query = Product.query.order_by(Product.created_at.asc(), Product.id.asc())
    products, pagination = paginate(query, page, current_app.config["ITEMS_PER_PAGE"])
    return render_template(template, products=products, pagination=pagination, page_title=title)

#-------------------------------------------------------
# Trang chủ & danh sách sản phẩm
@shop_bp.route("/")
def index():
    return catalogue("shop/index.html", "Shop")

@shop_bp.route("/products")
def products():
    return catalogue("shop/product_list.html", "All Products")

@shop_bp.route("/products/<int:product_id>")
def product_detail(product_id):
    product = db.get_or_404(Product, product_id)
    return render_template("shop/product_detail.html", product=product, page_title=product.title)

# Ảnh sản phẩm đã upload
@shop_bp.route("/images/<path:filename>")
def image(filename):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)

#-------------------------------------------------------
# Giỏ hàng
@shop_bp.route("/cart")
@login_required
def cart():
    return render_template(
        "shop/cart.html",
        items=current_user.cart_items,
        total=current_user.cart_total,
        page_title="Your Cart",
    )

@shop_bp.route("/cart", methods=["POST"])
@login_required
def add_to_cart():
    product = db.get_or_404(Product, request.form.get("productId", type=int))
    current_user.add_to_cart(product)
    db.session.commit()
    return redirect(url_for("shop.cart"))

@shop_bp.route("/cart-delete-item", methods=["POST"])
@login_required
def cart_delete_item():
    product_id = request.form.get("productId", type=int)
    current_user.remove_from_cart(product_id)
    db.session.commit()
    return redirect(url_for("shop.cart"))

#-------------------------------------------------------
# Thanh toán & đặt hàng
@shop_bp.route("/checkout")
@login_required
def checkout():
    if not current_user.cart_items:
        flash("Your cart is empty.", "info")
        return redirect(url_for("shop.cart"))

    return render_template(
        "shop/checkout.html",
        items=current_user.cart_items,
        total=current_user.cart_total,
        page_title="Checkout",
    )

@shop_bp.route("/create-order", methods=["POST"])
@login_required
def create_order():
    if not current_user.cart_items:
        flash("Your cart is empty.", "info")
        return redirect(url_for("shop.cart"))

    order = Order.from_cart(current_user._get_current_object())
    try:
        db.session.add(order)
        current_user.clear_cart()
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Creating order for user %s failed", current_user.id)
        flash("Could not place your order, please try again.", "error")
        return redirect(url_for("shop.cart"))

    send_email(
        f"Order #{order.id} confirmed",
        [order.email],
        "email/order.html",
        order=order,
        link=url_for("shop.orders", _external=True),
    )
    return redirect(url_for("shop.orders"))

@shop_bp.route("/orders")
@login_required
def orders():
    user_orders = (
        Order.query.filter_by(user_id=current_user.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return render_template("shop/orders.html", orders=user_orders, page_title="Your Orders")

#-------------------------------------------------------
# Xuất hoá đơn docx
def build_invoice(order):
    doc = Document()
    doc.add_heading(current_app.config["SHOP_NAME"], 0)
    doc.add_heading(f"Invoice #{order.id}", level=1)
    doc.add_paragraph(f"Customer: {order.email}")
    doc.add_paragraph(f"Date: {order.created_at.strftime('%d/%m/%Y %H:%M')}")

    table = doc.add_table(rows=1, cols=4)
    table.style = "Table Grid"
    header = table.rows[0].cells
    for cell, label in zip(header, ("Product", "Quantity", "Unit price", "Subtotal")):
        cell.text = label

    for item in order.items:
        row = table.add_row().cells
        row[0].text = item.title
        row[1].text = str(item.quantity)
        row[2].text = f"${item.price:.2f}"
        row[3].text = f"${item.subtotal:.2f}"

    doc.add_paragraph("")
    doc.add_paragraph(f"Total Price: ${order.total:.2f}").alignment = WD_ALIGN_PARAGRAPH.RIGHT

    buffer = BytesIO()
    doc.save(buffer)
    buffer.seek(0)
    return buffer

@shop_bp.route("/orders/<int:order_id>")
@login_required
def invoice(order_id):
    order = db.get_or_404(Order, order_id)
    if order.user_id != current_user.id:
        abort(403)

    return send_file(
        build_invoice(order),
        as_attachment=True,
        download_name=f"invoice-{order.id}.docx",
        mimetype="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    )
