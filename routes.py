from functools import wraps

from flask import Blueprint, abort, current_app, jsonify, request
from flask_login import current_user, login_required, login_user, logout_user
from sqlalchemy import and_, or_
from werkzeug.security import check_password_hash, generate_password_hash

from cart import add_customized_item, is_customizable, place_order, recalculate_totals
from customization import (
    CustomizationError,
    CustomizationRecord,
    format_price,
    project,
    summarize,
)
from emails import send_new_order_admin_email, send_order_confirmation_email
from models import CartItem, Order, Product, SavedCustomization, User, db

store = Blueprint("store", __name__)

ORDER_STATUSES = ("Placed", "Packed", "Shipped", "Delivered", "Cancelled")


def _settings():
    return current_app.extensions["bracelet_settings"]


def _catalog():
    return current_app.extensions["bracelet_catalog"]


def _flag(name):
    return request.args.get(name, "").lower() in ("1", "true", "yes")


def _error(code, message, status=400):
    return jsonify({"ok": False, "error": code, "message": message}), status


def _as_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _cart_count(user_id):
    return int(
        db.session.query(db.func.coalesce(db.func.sum(CartItem.quantity), 0))
        .filter_by(user_id=user_id)
        .scalar()
        or 0
    )


def _cart_item_dict(item, settings):
    record = item.record
    return {
        "id": item.id,
        "product_id": item.product_id,
        "name": item.product_name,
        "image": item.custom_image_url or item.product_image,
        "quantity": item.quantity,
        "unit_price": format_price(item.unit_price, settings),
        "line_total": format_price(item.line_total, settings),
        "customization": item.customization,
        "details": [{"key": k, "value": v} for k, v in project(record)] if record else [],
    }


def _order_dict(order, settings, with_summary=False):
    items = []
    for i in order.items:
        entry = {
            "name": i.product_name,
            "image": i.custom_image_url or i.product_image,
            "quantity": i.quantity,
            "unit_price": format_price(i.unit_price, settings),
            "customization": i.customization,
            "details": [{"key": k, "value": v} for k, v in i.customization_meta or []],
        }
        if with_summary:
            record = i.record
            entry["summary"] = summarize(record) if record else []
        items.append(entry)

    return {
        "id": order.id,
        "status": order.status,
        "tracking_message": order.tracking_message,
        "total": format_price(order.total_amount, settings),
        "created_at": order.created_at.isoformat() if order.created_at else None,
        "shipping_name": order.shipping_name,
        "shipping_email": order.shipping_email,
        "items": items,
    }


# ----------------------------
# ADMIN DECORATOR
# ----------------------------
def admin_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not current_user.is_authenticated or not current_user.is_admin:
            return _error("admin_only", "Admin access only.", 403)
        return fn(*args, **kwargs)
    return wrapper


# ----------------------------
# CUSTOMIZER DATA
# ----------------------------
@store.route("/api/bracelets")
def get_bracelets():
    result = _catalog().bracelets(
        category=request.args.get("category"),
        bestsellers_only=_flag("bestsellers_only"),
    )
    return jsonify(result.to_dict())


@store.route("/api/charms")
def get_charms():
    category = request.args.get("category") or "All"
    result = _catalog().charms(category=category, new_only=_flag("new_only"))
    payload = result.to_dict()
    payload["category"] = category
    return jsonify(payload)


@store.route("/api/collabs")
def get_collabs():
    return jsonify(_catalog().collabs().to_dict())


@store.route("/api/settings")
def get_settings():
    return jsonify(_settings().to_public_dict())


@store.route("/api/customization", methods=["POST"])
def save_customization():
    """
    Save a draft design from the customizer.

    The returned id (or the session_id) is what /cart/add accepts as
    customization_id.
    """
    data = request.get_json(silent=True) or {}
    session_id = data.get("session_id")
    product_id = data.get("product_id")
    customization_data = data.get("customization_data")

    if not session_id or not product_id or not customization_data:
        return _error("missing_data", "Missing required data")

    product_id = _as_int(product_id)
    product = db.session.get(Product, product_id) if product_id else None
    if not product:
        abort(404)

    try:
        record = CustomizationRecord.from_payload(customization_data)
    except CustomizationError as e:
        return _error(e.code, e.message)

    saved = SavedCustomization(
        session_id=str(session_id),
        user_id=current_user.id if current_user.is_authenticated else None,
        product_id=product.id,
        data=record.to_payload(),
    )
    db.session.add(saved)
    db.session.commit()
    return jsonify({"success": True, "id": saved.id})


# ----------------------------
# AUTH
# ----------------------------
@store.route("/signup", methods=["POST"])
def signup():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    if not email or not password:
        return _error("missing_data", "Email and password are required.")
    if User.query.filter_by(email=email).first():
        return _error("email_taken", "An account with this email already exists.")

    user = User(
        email=email,
        name=data.get("name"),
        password_hash=generate_password_hash(password),
    )
    db.session.add(user)
    db.session.commit()
    login_user(user)
    return jsonify({"ok": True, "user_id": user.id}), 201


@store.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    user = User.query.filter_by(email=email).first()

    if not user or not check_password_hash(user.password_hash, data.get("password") or ""):
        return _error("invalid_credentials", "Invalid email or password.", 401)

    login_user(user)
    return jsonify({"ok": True, "user_id": user.id, "is_admin": bool(user.is_admin)})


@store.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"ok": True})


# ----------------------------
# CART
# ----------------------------
@store.route("/cart")
@login_required
def cart():
    settings = _settings()
    items = CartItem.query.filter_by(user_id=current_user.id).order_by(CartItem.id).all()
    total = recalculate_totals(items, settings)
    db.session.commit()

    return jsonify({
        "items": [_cart_item_dict(i, settings) for i in items],
        "total": format_price(total, settings),
        "currency": settings.currency,
    })


def _find_saved_customization(customization_id, user_id):
    """
    Latest draft whose session id matches, or the user's own draft by id.

    Numeric ids only resolve drafts saved by the same user.
    """
    key = str(customization_id)
    conditions = [SavedCustomization.session_id == key]
    if key.isdigit():
        conditions.append(and_(
            SavedCustomization.id == int(key),
            SavedCustomization.user_id == user_id,
        ))
    return (
        SavedCustomization.query.filter(or_(*conditions))
        .order_by(SavedCustomization.created_at.desc(), SavedCustomization.id.desc())
        .first()
    )


@store.route("/cart/add", methods=["POST"])
@login_required
def add_to_cart():
    """
    Add a customized bracelet to the cart.

    JSON body:
    - product_id, quantity (default 1)
    - customization: the design itself, or
      customization_id: a draft saved through /api/customization
    - custom_image_url (optional preview rendered by the customizer)
    """
    if current_user.is_admin:
        return _error("admin_only", "Admins cannot shop.", 403)

    data = request.get_json(silent=True) or {}
    settings = _settings()

    payload = data.get("customization")
    customization_id = data.get("customization_id")
    product_id = data.get("product_id")

    if customization_id:
        saved = _find_saved_customization(customization_id, current_user.id)
        if not saved:
            current_app.logger.warning("Customization not found for ID: %s", customization_id)
            return _error("customization_not_found", "Customization not found.", 404)
        payload = saved.data
        product_id = product_id or saved.product_id

    if not product_id or not payload:
        return _error("missing_data", "Invalid data provided.")

    product_id = _as_int(product_id)
    product = db.session.get(Product, product_id) if product_id else None
    if not product or not product.is_active:
        abort(404)
    if not is_customizable(product):
        return _error("not_customizable", "Product is not customizable.")

    quantity = _as_int(data.get("quantity") or 1)
    if quantity is None:
        return _error("missing_data", "Quantity must be a number.")

    try:
        record = CustomizationRecord.from_payload(payload)
        item = add_customized_item(
            current_user,
            product,
            record,
            settings,
            quantity=quantity,
            custom_image_url=data.get("custom_image_url"),
            customization_id=str(customization_id) if customization_id else None,
        )
    except CustomizationError as e:
        current_app.logger.info("Rejected customization for product %s: %s", product.id, e.code)
        return _error(e.code, e.message)

    db.session.commit()
    return jsonify({
        "ok": True,
        "message": "Bracelet added to cart!",
        "cart_item_id": item.id,
        "cart_count": _cart_count(current_user.id),
    })


@store.route("/cart/update/<int:item_id>", methods=["POST"])
@login_required
def update_cart_item(item_id):
    """Only the quantity can change; a different design needs a new line."""
    item = CartItem.query.filter_by(id=item_id, user_id=current_user.id).first_or_404()
    data = request.get_json(silent=True) or {}

    qty = _as_int(data.get("quantity"))
    if qty is None:
        return _error("missing_data", "Quantity must be a number.")

    if qty > 0:
        item.quantity = qty
    else:
        db.session.delete(item)
    db.session.commit()
    return jsonify({"ok": True, "cart_count": _cart_count(current_user.id)})


@store.route("/cart/remove/<int:item_id>", methods=["POST"])
@login_required
def remove_cart_item(item_id):
    item = CartItem.query.filter_by(id=item_id, user_id=current_user.id).first_or_404()
    db.session.delete(item)
    db.session.commit()
    return jsonify({"ok": True, "cart_count": _cart_count(current_user.id)})


# ----------------------------
# CHECKOUT
# ----------------------------
@store.route("/checkout", methods=["POST"])
@login_required
def checkout():
    if current_user.is_admin:
        return _error("admin_only", "Admins cannot shop.", 403)

    settings = _settings()
    items = CartItem.query.filter_by(user_id=current_user.id).order_by(CartItem.id).all()
    if not items:
        return _error("cart_empty", "Your cart is empty.")

    shipping = request.get_json(silent=True) or {}
    order = place_order(current_user, items, shipping, settings)
    db.session.commit()

    send_order_confirmation_email(order, settings)
    send_new_order_admin_email(order, settings)

    current_app.logger.info("Order %s placed by user %s", order.id, current_user.id)
    return jsonify({"ok": True, "order": _order_dict(order, settings)}), 201


# ----------------------------
# MY ORDERS
# ----------------------------
@store.route("/my-orders")
@login_required
def my_orders():
    settings = _settings()
    orders = (
        Order.query.filter_by(user_id=current_user.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return jsonify({"orders": [_order_dict(o, settings) for o in orders]})


# ----------------------------
# ADMIN PANEL
# ----------------------------
@store.route("/admin/orders")
@admin_required
def admin_orders():
    settings = _settings()
    orders = Order.query.order_by(Order.created_at.desc(), Order.id.desc()).all()
    live_orders = [o for o in orders if o.status not in ("Delivered", "Cancelled")]
    return jsonify({
        "orders": [_order_dict(o, settings, with_summary=True) for o in orders],
        "live_orders": len(live_orders),
        "total_revenue": format_price(sum(o.total_amount for o in orders), settings),
    })


@store.route("/admin/order/<int:order_id>", methods=["GET", "POST"])
@admin_required
def admin_order_detail(order_id):
    order = db.get_or_404(Order, order_id)

    if request.method == "POST":
        data = request.get_json(silent=True) or {}
        status = data.get("status")
        tracking_message = data.get("tracking_message")

        if status and status not in ORDER_STATUSES:
            return _error("invalid_status", f"Unknown status: {status}")
        if status:
            order.status = status
        if tracking_message:
            order.tracking_message = tracking_message
        db.session.commit()

    return jsonify(_order_dict(order, _settings(), with_summary=True))
