import smtplib
from email.mime.text import MIMEText

from flask import current_app

from customization import format_price


def send_email(to_email, subject, body):
    """Plain-text SMTP mail. Failures are logged, never raised."""
    config = current_app.config
    if not config.get("MAIL_ENABLED"):
        current_app.logger.info("Mail disabled, not sending %r to %s", subject, to_email)
        return False

    try:
        msg = MIMEText(body)
        msg["Subject"] = subject
        msg["From"] = config["MAIL_USERNAME"]
        msg["To"] = to_email

        with smtplib.SMTP(config["MAIL_SERVER"], config["MAIL_PORT"]) as server:
            if config.get("MAIL_USE_TLS"):
                server.starttls()
            if config.get("MAIL_PASSWORD"):
                server.login(config["MAIL_USERNAME"], config["MAIL_PASSWORD"])
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        current_app.logger.error("Email error for %s: %s", to_email, e)
        return False
    return True


def format_order_lines(order, settings):
    lines = []
    for item in order.items:
        amount = format_price(item.line_amount(settings), settings)
        line = f"- {item.product_name}"
        if item.product_size and not item.customization_meta:
            line += f" | Size: {item.product_size}"
        line += f" | Qty: {item.quantity} | {settings.currency} {amount}"
        lines.append(line)
        for label, value in item.customization_meta or []:
            lines.append(f"    {label}: {value}")
    return "\n".join(lines)


def send_order_confirmation_email(order, settings):
    subject = f"Your order #{order.id} has been placed"
    body = f"""
Hi {order.shipping_name or order.shipping_email},

Thank you for your order. Your order #{order.id} has been placed.

Order summary:
{format_order_lines(order, settings)}

Total amount: {settings.currency} {format_price(order.total_amount, settings)}

Shipping to:
{order.shipping_name or ""}
{order.shipping_address or ""}
{order.shipping_pincode or ""}

Current status: {order.status} - {order.tracking_message}

We will share updates as your bracelet is made, shipped and delivered.
"""
    if order.shipping_email:
        return send_email(order.shipping_email, subject, body)
    return False


def send_new_order_admin_email(order, settings):
    subject = f"New order #{order.id} placed"
    body = f"""
Hello,

A new order has been placed.

Order ID: {order.id}
Date: {order.created_at.strftime('%d %b %Y')}
Customer: {order.shipping_name or order.shipping_email}
Total: {settings.currency} {format_price(order.total_amount, settings)}

Items:
{format_order_lines(order, settings)}

Shipping:
Name: {order.shipping_name or ""}
Email: {order.shipping_email or ""}
Phone: {order.shipping_phone or ""}
Address: {order.shipping_address or ""}
Pincode: {order.shipping_pincode or ""}
"""
    return send_email(current_app.config["ADMIN_EMAIL"], subject, body)
