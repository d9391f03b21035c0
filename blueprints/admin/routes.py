from flask import Blueprint, render_template, redirect, jsonify, url_for, flash, request, current_app, send_file
from flask_login import current_user
from models.product import Product
from models.order import OrderItem
import os, io
from extensions import db
from datetime import datetime
from decimal import Decimal, InvalidOperation
from werkzeug.utils import secure_filename
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
import pandas as pd

admin_bp = Blueprint("admin", __name__, template_folder="../../templates/admin")

# Middleware: phải đăng nhập mới vào được khu quản lý sản phẩm
@admin_bp.before_request
def require_login():
    if not current_user.is_authenticated:
        flash("Please log in to access this page.", "error")
        return redirect(url_for("auth.login"))

#-------------------------------------------------------
# Ảnh sản phẩm
def is_image(fileobj):
    return bool(fileobj and fileobj.filename) and \
        fileobj.mimetype in current_app.config["ALLOWED_IMAGE_MIMETYPES"]

def image_timestamp():
    # 2026-10-19T15:05:01.123Z -> 20261019T150501.123Z
    return datetime.utcnow().strftime("%Y%m%dT%H%M%S.%f")[:-3] + "Z"

def save_image(fileobj):
    safe = secure_filename(fileobj.filename)
    filename = f"{image_timestamp()}-{safe}"
    fileobj.save(os.path.join(current_app.config["UPLOAD_FOLDER"], filename))
    return f"images/{filename}"

def delete_image(image_url):
    path = os.path.join(current_app.config["UPLOAD_FOLDER"], image_url.rsplit("/", 1)[-1])
    try:
        os.remove(path)
    except OSError:
        current_app.logger.warning("Could not delete image file %s", path)

#-------------------------------------------------------
# Kiểm tra form sản phẩm
def validate_product(form):
    errors = []
    data = {
        "title": (form.get("title") or "").strip(),
        "price": (form.get("price") or "").strip(),
        "description": (form.get("description") or "").strip(),
    }

    if len(data["title"]) < 3:
        errors.append({"param": "title", "msg": "Title must be at least 3 characters long."})

    try:
        price = Decimal(data["price"])
        if not price.is_finite() or price <= 0:
            raise InvalidOperation
        data["price"] = price.quantize(Decimal("0.01"))
    except InvalidOperation:
        errors.append({"param": "price", "msg": "Price must be a positive number."})

    if not 5 <= len(data["description"]) <= 400:
        errors.append({"param": "description", "msg": "Description must be between 5 and 400 characters."})

    return data, errors

def render_product_form(product=None, editing=False, old_input=None, errors=None, status=200):
    errors = errors or []
    return render_template(
        "admin/edit_product.html",
        page_title="Edit Product" if editing else "Add Product",
        editing=editing,
        product=product,
        old_input=old_input or {},
        error_message=errors[0]["msg"] if errors else None,
        validation_errors=[e["param"] for e in errors],
    ), status

def get_owned_product(product_id):
    if not product_id:
        return None
    return Product.query.filter_by(id=product_id, user_id=current_user.id).first()

#-------------------------------------------------------
# Thêm sản phẩm
@admin_bp.route("/add-product", methods=["GET", "POST"])
def add_product():
    if request.method == "POST":
        image = request.files.get("image")
        data, errors = validate_product(request.form)
        old_input = dict(request.form)

        if not is_image(image):
            errors.insert(0, {"param": "image", "msg": "Attached file is not an image."})
        if errors:
            return render_product_form(old_input=old_input, errors=errors, status=422)

        product = Product(
            title=data["title"],
            price=data["price"],
            description=data["description"],
            image_url=save_image(image),
            user_id=current_user.id,
        )
        try:
            db.session.add(product)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            delete_image(product.image_url)
            current_app.logger.exception("Creating product failed")
            flash("Could not save the product, please try again.", "error")
            return redirect(url_for("admin.products"))

        current_app.logger.info("User %s created product %s", current_user.id, product.id)
        flash("Product created.", "success")
        return redirect(url_for("admin.products"))

    return render_product_form()

# Sửa sản phẩm
@admin_bp.route("/edit-product/<int:product_id>")
def edit_product(product_id):
    if request.args.get("edit") != "true":
        return redirect(url_for("shop.index"))

    product = get_owned_product(product_id)
    if not product:
        return redirect(url_for("shop.index"))

    return render_product_form(product=product, editing=True)

@admin_bp.route("/edit-product", methods=["POST"])
def post_edit_product():
    product = get_owned_product(request.form.get("productId", type=int))
    if not product:
        return redirect(url_for("shop.index"))

    data, errors = validate_product(request.form)
    if errors:
        return render_product_form(
            product=product,
            editing=True,
            old_input=dict(request.form),
            errors=errors,
            status=422,
        )

    product.title = data["title"]
    product.price = data["price"]
    product.description = data["description"]

    # Ảnh mới hợp lệ thì thay ảnh cũ, không thì giữ nguyên
    image = request.files.get("image")
    old_image_url = new_image_url = None
    if is_image(image):
        old_image_url = product.image_url
        new_image_url = product.image_url = save_image(image)

    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        if new_image_url:
            delete_image(new_image_url)
        current_app.logger.exception("Updating product %s failed", request.form.get("productId"))
        flash("Could not save the product, please try again.", "error")
        return redirect(url_for("admin.products"))

    if old_image_url:
        delete_image(old_image_url)
    flash("Product updated.", "success")
    return redirect(url_for("admin.products"))

#-------------------------------------------------------
# Xoá sản phẩm
def delete_owned_product(product_id):
    product = get_owned_product(product_id)
    if not product:
        return False

    image_url = product.image_url
    db.session.delete(product)
    db.session.commit()
    delete_image(image_url)
    current_app.logger.info("User %s deleted product %s", current_user.id, product_id)
    return True

@admin_bp.route("/delete-product", methods=["POST"])
def delete_product():
    if delete_owned_product(request.form.get("productId", type=int)):
        flash("Product deleted.", "success")
    return redirect(url_for("admin.products"))

# API xoá (JSON) -> dùng fetch gọi
@admin_bp.route("/product/<int:product_id>", methods=["DELETE"])
def delete_product_api(product_id):
    if not delete_owned_product(product_id):
        return jsonify({"message": "Deleting product failed."}), 404
    return jsonify({"message": "Success!"})

#-------------------------------------------------------
# Danh sách sản phẩm của tôi
@admin_bp.route("/products")
def products():
    my_products = (
        Product.query.filter_by(user_id=current_user.id)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .all()
    )
    return render_template("admin/products.html", products=my_products, page_title="Admin Products")

# Xuất file excel sản phẩm + doanh số
@admin_bp.route("/products/export")
def export_products():
    my_products = Product.query.filter_by(user_id=current_user.id).order_by(Product.id).all()

    sales = {
        product_id: (int(units or 0), revenue or 0)
        for product_id, units, revenue in (
            db.session.query(
                OrderItem.product_id,
                func.sum(OrderItem.quantity),
                func.sum(OrderItem.price * OrderItem.quantity),
            )
            .filter(OrderItem.product_id.in_([p.id for p in my_products]))
            .group_by(OrderItem.product_id)
            .all()
        )
    }

    df_products = pd.DataFrame(
        [{
            "ID": p.id,
            "Title": p.title,
            "Price": float(p.price),
            "Units sold": sales.get(p.id, (0, 0))[0],
            "Revenue": float(sales.get(p.id, (0, 0))[1]),
            "Created": p.created_at.strftime("%d/%m/%Y") if p.created_at else "",
        } for p in my_products],
        columns=["ID", "Title", "Price", "Units sold", "Revenue", "Created"],
    )

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="xlsxwriter") as writer:
        df_products.to_excel(writer, index=False, sheet_name="Products")

        workbook = writer.book
        worksheet = writer.sheets["Products"]
        header_format = workbook.add_format({"bold": True, "bg_color": "#CCE5FF", "border": 1})
        for col_num, value in enumerate(df_products.columns.values):
            worksheet.write(0, col_num, value, header_format)

    output.seek(0)
    filename = f"products_{datetime.now().strftime('%Y-%m-%d_%H-%M')}.xlsx"

    return send_file(
        output,
        as_attachment=True,
        download_name=filename,
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
