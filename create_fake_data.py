import os
import random
import shutil
import sys
from decimal import Decimal

from extensions import db
from app import create_app
from flask import current_app
from models import User, Product

# ====== CONFIG ======
NUM_PRODUCTS = 12
PLACEHOLDER_IMAGE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static", "placeholder.png")
# =====================

TITLES = [
    "Handwoven Basket",
    "Ceramic Mug",
    "Linen Tote Bag",
    "Brass Candle Holder",
    "Olive Wood Spoon",
    "Wool Throw Blanket",
    "Leather Notebook",
    "Clay Plant Pot",
    "Cotton Apron",
    "Glass Water Bottle",
]

DESCRIPTIONS = [
    "Made by local artisans from sustainable materials.",
    "A small everyday object that lasts for years.",
    "Perfect as a gift, packed in recycled paper.",
    "Simple, sturdy and easy to clean.",
]


def copy_placeholder(index):
    """Chép ảnh mẫu vào thư mục upload, trả về image_url"""
    filename = f"seed-{index}-placeholder.png"
    shutil.copyfile(PLACEHOLDER_IMAGE, os.path.join(current_app.config["UPLOAD_FOLDER"], filename))
    return f"images/{filename}"


def seed_products(email, count=NUM_PRODUCTS):
    print("📦 Creating demo products...")

    owner = User.query.filter_by(email=email.strip().lower()).first()
    if not owner:
        print(f"⚠️ No account with email {email}. Run create_user.py first.")
        return []

    products = []
    for i in range(count):
        product = Product(
            title=f"{random.choice(TITLES)} #{i + 1}",
            price=Decimal(random.randint(500, 9900)) / 100,
            description=random.choice(DESCRIPTIONS),
            image_url=copy_placeholder(i + 1),
            user_id=owner.id,
        )
        products.append(product)

    db.session.add_all(products)
    db.session.commit()
    print(f"✅ Created {len(products)} products for {owner.email}.")
    return products


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python create_fake_data.py <owner email> [count]")
        sys.exit(1)

    app = create_app()
    with app.app_context():
        seed_products(sys.argv[1], int(sys.argv[2]) if len(sys.argv) > 2 else NUM_PRODUCTS)
