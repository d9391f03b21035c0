import re
import secrets

from flask import Blueprint, render_template, request, redirect, url_for, flash, session, current_app, get_flashed_messages
from flask_login import login_user, logout_user
from extensions import db
from mailer import send_email
from models.user import User

auth_bp = Blueprint("auth", __name__, template_folder="../../templates")

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

#-------------------------------------------------------
# Kiểm tra dữ liệu form
def normalize_email(email):
    return (email or "").strip().lower()

def is_valid_email(email):
    return bool(EMAIL_RE.match(email))

def is_valid_password(password):
    return len(password) >= 5 and password.isascii() and password.isalnum()

def validate_login(email, password):
    errors = []
    if not is_valid_email(email):
        errors.append({"param": "email", "msg": "Please enter a valid email address."})
    if not is_valid_password(password):
        errors.append({"param": "password", "msg": "Password has to be valid."})
    return errors

def validate_new_password(password, confirm_password=None):
    errors = []
    if not is_valid_password(password):
        errors.append({
            "param": "password",
            "msg": "Please enter a password with only numbers and text and at least 5 characters.",
        })
    if confirm_password is not None and password != confirm_password:
        errors.append({"param": "confirm_password", "msg": "Passwords have to match!"})
    return errors

def validate_signup(email, password, confirm_password):
    errors = []
    if not is_valid_email(email):
        errors.append({"param": "email", "msg": "Please enter a valid email address."})
    elif User.query.filter_by(email=email).first():
        errors.append({"param": "email", "msg": "E-Mail exists already, please pick a different one."})
    errors.extend(validate_new_password(password, confirm_password))
    return errors

def render_form(template, status=200, errors=None, error_message=None, **context):
    errors = errors or []
    return render_template(
        template,
        error_message=errors[0]["msg"] if errors else error_message,
        validation_errors=[e["param"] for e in errors],
        **context,
    ), status

def first_flashed_error():
    messages = get_flashed_messages(category_filter=["error"])
    return messages[0] if messages else None

#-------------------------------------------------------
# Đăng nhập
@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    if request.method == "POST":
        email = normalize_email(request.form.get("email"))
        password = request.form.get("password", "")
        old_input = {"email": email, "password": password}

        errors = validate_login(email, password)
        if errors:
            return render_form("auth/login.html", 422, errors, old_input=old_input)

        user = User.query.filter_by(email=email).first()
        if not user or not user.check_password(password):
            return render_form(
                "auth/login.html", 422,
                error_message="Invalid email or password.",
                old_input=old_input,
            )

        login_user(user)
        session["is_logged_in"] = True
        current_app.logger.info("User %s logged in", user.id)
        return redirect(url_for("shop.index"))

    return render_form(
        "auth/login.html",
        error_message=first_flashed_error(),
        old_input={"email": "", "password": ""},
    )

# Đăng ký
@auth_bp.route("/signup", methods=["GET", "POST"])
def signup():
    if request.method == "POST":
        email = normalize_email(request.form.get("email"))
        password = request.form.get("password", "")
        confirm_password = request.form.get("confirm_password", "")
        old_input = {"email": email, "password": password, "confirm_password": confirm_password}

        errors = validate_signup(email, password, confirm_password)
        if errors:
            return render_form("auth/signup.html", 422, errors, old_input=old_input)

        user = User(email=email)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()

        flash("Signup succeeded! Please log in.", "success")
        send_email("Signup succeeded!", [email], "email/signup.html", email=email)
        return redirect(url_for("auth.login"))

    return render_form(
        "auth/signup.html",
        error_message=first_flashed_error(),
        old_input={"email": "", "password": "", "confirm_password": ""},
    )

# Đăng xuất
@auth_bp.route("/logout", methods=["POST"])
def logout():
    logout_user()
    session.clear()
    return redirect(url_for("shop.index"))

# -----------------------------------------------------------------------------
# Quên mật khẩu
@auth_bp.route("/reset", methods=["GET", "POST"])
def reset():
    if request.method == "POST":
        token = secrets.token_hex(32)
        email = normalize_email(request.form.get("email"))

        user = User.query.filter_by(email=email).first()
        if not user:
            flash("No account with that email.", "error")
            return redirect(url_for("auth.reset"))

        user.issue_reset_token(token, current_app.config["RESET_TOKEN_TTL"])
        db.session.commit()

        send_email(
            "Password Reset",
            [user.email],
            "email/reset.html",
            link=url_for("auth.new_password", token=token, _external=True),
        )
        flash("Check your inbox for a link to reset your password.", "info")
        return redirect(url_for("shop.index"))

    return render_template("auth/reset.html", error_message=first_flashed_error())

# Đặt lại mật khẩu
@auth_bp.route("/reset/<token>")
def new_password(token):
    user = User.find_by_reset_token(token)
    if not user:
        flash("Password reset link is invalid or has expired.", "error")
        return redirect(url_for("auth.reset"))

    return render_form(
        "auth/new_password.html",
        error_message=first_flashed_error(),
        user_id=user.id,
        password_token=token,
    )

@auth_bp.route("/new-password", methods=["POST"])
def post_new_password():
    password = request.form.get("password", "")
    password_token = request.form.get("password_token", "")
    user_id = request.form.get("user_id", type=int)

    user = User.find_by_reset_token(password_token, user_id=user_id) if user_id else None
    if not user:
        flash("Password reset link is invalid or has expired.", "error")
        return redirect(url_for("auth.reset"))

    errors = validate_new_password(password)
    if errors:
        return render_form(
            "auth/new_password.html", 422, errors,
            user_id=user.id,
            password_token=password_token,
        )

    user.set_password(password)
    user.clear_reset_token()
    db.session.commit()

    flash("Your password has been updated. Please log in.", "success")
    return redirect(url_for("auth.login"))
