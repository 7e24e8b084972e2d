from datetime import datetime
from decimal import Decimal

from flask_login import UserMixin
from flask_sqlalchemy import SQLAlchemy

from customization import CustomizationRecord, resolve_price

db = SQLAlchemy()

# ----------------------------
# MODELS
# ----------------------------
class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(150), unique=True, nullable=False)
    name = db.Column(db.String(150))
    password_hash = db.Column(db.String(255), nullable=False)
    is_admin = db.Column(db.Boolean, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def get_id(self):
        return str(self.id)


class Product(db.Model):
    """A catalog row: a bracelet, a charm or a collab bracelet."""

    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(150), unique=True, nullable=False)
    name = db.Column(db.String(255), nullable=False)
    product_type = db.Column(db.String(30), nullable=False, default="standard_bracelet")
    price = db.Column(db.Numeric(10, 2), nullable=False, default=0)

    category = db.Column(db.String(100))
    description = db.Column(db.Text, default="")
    sizes = db.Column(db.String(255), default="")  # comma separated, bracelets only
    image_url = db.Column(db.String(500))
    vibe = db.Column(db.String(255), default="")
    tags = db.Column(db.String(255), default="")

    is_bestseller = db.Column(db.Boolean, default=False)
    is_new = db.Column(db.Boolean, default=False)
    customizable = db.Column(db.Boolean, default=False)
    is_active = db.Column(db.Boolean, default=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def size_list(self):
        return [s.strip() for s in (self.sizes or "").split(",") if s.strip()]

    def tag_list(self):
        return [t.strip() for t in (self.tags or "").split(",") if t.strip()]


class SavedCustomization(db.Model):
    """Draft design saved by the customizer before it goes to the cart."""

    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.String(100), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"))
    product_id = db.Column(db.Integer, db.ForeignKey("product.id"), nullable=False)
    data = db.Column(db.JSON, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class CartItem(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey("product.id"), nullable=False)

    product_name = db.Column(db.String(255), nullable=False)
    base_price = db.Column(db.Numeric(10, 2), nullable=False)
    unit_price = db.Column(db.Numeric(10, 2), nullable=False)
    product_image = db.Column(db.String(500))
    product_size = db.Column(db.String(50))

    # set once at add-to-cart, never edited
    customization = db.Column(db.JSON)
    customization_id = db.Column(db.String(100))
    custom_image_url = db.Column(db.String(500))

    quantity = db.Column(db.Integer, default=1)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    product = db.relationship("Product")

    @property
    def record(self):
        if not self.customization:
            return None
        return CustomizationRecord.from_payload(self.customization)

    @property
    def line_total(self):
        return Decimal(str(self.unit_price)) * (self.quantity or 0)


class Order(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)

    total_amount = db.Column(db.Numeric(10, 2), nullable=False)
    status = db.Column(db.String(50), default="Placed")  # Placed, Packed, Shipped, Delivered
    tracking_message = db.Column(db.String(255), default="Order received")

    shipping_name = db.Column(db.String(150))
    shipping_email = db.Column(db.String(150))
    shipping_phone = db.Column(db.String(30))
    shipping_address = db.Column(db.String(255))
    shipping_pincode = db.Column(db.String(20))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    items = db.relationship("OrderItem", backref="order", lazy=True, order_by="OrderItem.id")


class OrderItem(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("order.id"), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey("product.id"))

    product_name = db.Column(db.String(255), nullable=False)
    base_price = db.Column(db.Numeric(10, 2))
    unit_price = db.Column(db.Numeric(10, 2), nullable=False)
    product_image = db.Column(db.String(500))
    product_size = db.Column(db.String(50))
    quantity = db.Column(db.Integer, default=1)

    # verbatim copy of the cart line's record, plus its display pairs
    customization = db.Column(db.JSON)
    customization_meta = db.Column(db.JSON)
    custom_image_url = db.Column(db.String(500))

    @property
    def record(self):
        if not self.customization:
            return None
        return CustomizationRecord.from_payload(self.customization)

    def line_amount(self, settings):
        """Unrounded line amount, repriced from the base price when there is a record."""
        record = self.record
        if record is not None and self.base_price is not None:
            unit_price = resolve_price(self.base_price, record, settings)
        else:
            unit_price = Decimal(str(self.unit_price))
        return unit_price * (self.quantity or 0)
