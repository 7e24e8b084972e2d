"""
Cart and order lines for customized bracelets.

These helpers stage changes on db.session; the caller commits.
"""

from decimal import Decimal

from customization import project, resolve_price, validate
from models import CartItem, Order, OrderItem, db


def is_customizable(product) -> bool:
    if not product:
        return False
    return product.product_type == "standard_bracelet" or bool(product.customizable)


def add_customized_item(user, product, record, settings, quantity=1,
                        custom_image_url=None, customization_id=None):
    """
    Validate a record and put it on a new cart line.

    Customized lines are never merged with an existing line, even when the
    design is identical, so each line keeps its own record.
    """
    validate(record, settings)

    base_price = Decimal(str(product.price or 0))
    item = CartItem(
        user_id=user.id,
        product_id=product.id,
        product_name=product.name,
        base_price=base_price,
        unit_price=resolve_price(base_price, record, settings),
        product_image=product.image_url,
        product_size=record.size or "",
        customization=record.to_payload(),
        customization_id=customization_id,
        custom_image_url=custom_image_url,
        quantity=max(int(quantity or 1), 1),
    )
    db.session.add(item)
    return item


def recalculate_totals(items, settings) -> Decimal:
    """
    Reprice every customized line from its base price and return the cart total.

    Lines without a customization keep their unit price.
    """
    total = Decimal("0")
    for item in items:
        record = item.record
        if record is not None:
            item.unit_price = resolve_price(item.base_price, record, settings)
        total += item.line_total
    return total


def place_order(user, items, shipping, settings) -> Order:
    total = recalculate_totals(items, settings)

    order = Order(
        user_id=user.id,
        total_amount=total,
        status="Placed",
        tracking_message="Order placed. Preparing for dispatch.",
        shipping_name=shipping.get("name") or user.name,
        shipping_email=shipping.get("email") or user.email,
        shipping_phone=shipping.get("phone"),
        shipping_address=shipping.get("address"),
        shipping_pincode=shipping.get("pincode"),
    )
    db.session.add(order)
    db.session.flush()

    for i in items:
        record = i.record
        db.session.add(OrderItem(
            order_id=order.id,
            product_id=i.product_id,
            product_name=i.product_name,
            base_price=i.base_price,
            unit_price=i.unit_price,
            product_image=i.product_image,
            product_size=i.product_size,
            quantity=i.quantity,
            customization=i.customization,
            customization_meta=[list(pair) for pair in project(record)] if record else None,
            custom_image_url=i.custom_image_url,
        ))

    for i in items:
        db.session.delete(i)

    return order
