import sys

from app import create_app
from extensions import db
from models.user import User
from blueprints.auth.routes import normalize_email, is_valid_email, is_valid_password


def create_account(email, password):
    email = normalize_email(email)
    if not is_valid_email(email) or not is_valid_password(password):
        print("⚠️ Invalid email or password (min 5 letters/digits).")
        return None

    if User.query.filter_by(email=email).first():
        print(f"⚠️ Account {email} already exists!")
        return None

    user = User(email=email)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    print(f"Account {email} created successfully!")
    return user


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python create_user.py <email> <password>  (creates a regular shop account)")
        sys.exit(1)

    app = create_app()
    with app.app_context():
        db.create_all()
        create_account(sys.argv[1], sys.argv[2])
