from datetime import datetime

from app import create_app
from extensions import db
from models import User


def clear_expired_tokens(now=None):
    now = now or datetime.utcnow()
    users = User.query.filter(
        User.reset_token.isnot(None),
        User.reset_token_expiration <= now,
    ).all()

    for user in users:
        print(f" - {user.email}: token expired at {user.reset_token_expiration}")
        user.clear_reset_token()

    db.session.commit()
    return len(users)


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        print("🔄 Clearing expired password reset tokens...")
        cleared = clear_expired_tokens()
        print(f"✅ Cleared {cleared} token(s).")
