# Overview: Service-layer operations for customer text notifications.

from __future__ import annotations

import time
from typing import Protocol

from flask import current_app

from ..models import SMS_FAILED, SMS_SENT, Order, PaymentStatus, SMSLog, new_id
from velvessa.time_utils import to_utc_z, utcnow
from .audit_service import add_log
from .state_service import DomainState


class SmsGateway(Protocol):
    def send(self, recipient: str, message: str) -> bool:
        """Deliver one message; True when the gateway accepted it."""
        ...


class SimulatedSmsGateway:
    """
    Stand-in transport. Waits a fixed delay to model network latency and
    always succeeds; a real provider can replace it without touching the
    workflows below.
    """

    def __init__(self, delay_seconds: float = 1.0):
        self.delay_seconds = delay_seconds

    def send(self, recipient: str, message: str) -> bool:
        if self.delay_seconds > 0:
            time.sleep(self.delay_seconds)
        return True


def gateway_from_config() -> SimulatedSmsGateway:
    return SimulatedSmsGateway(delay_seconds=current_app.config.get("SMS_DISPATCH_DELAY_SECONDS", 1.0))


def format_amount(cents: int) -> str:
    """Whole amounts print without decimals (393), others with two (393.50)."""
    sign = "-" if cents < 0 else ""
    whole, fraction = divmod(abs(cents), 100)
    if fraction:
        return f"{sign}{whole}.{fraction:02d}"
    return f"{sign}{whole}"


def _money(cents: int) -> str:
    return f"{current_app.config.get('CURRENCY_SYMBOL', '৳')}{format_amount(cents)}"


def _store_name() -> str:
    return current_app.config.get("STORE_NAME", "Velvessa Closet")


def _customer_for(state: DomainState, order: Order):
    return next((c for c in state.customers if c.id == order.customer_id), None)


def send_sms(state: DomainState, gateway: SmsGateway, recipient: str, message: str) -> SMSLog:
    """Dispatch one message and record the attempt in the SMS log."""
    delivered = gateway.send(recipient, message)
    entry = SMSLog(
        id=new_id("sms"),
        recipient=recipient,
        message=message,
        timestamp=to_utc_z(utcnow()),
        status=SMS_SENT if delivered else SMS_FAILED,
    )
    state.replace("sms_logs", lambda prev: [entry, *prev])
    current_app.logger.info("SMS to %s %s", recipient, entry.status)
    return entry


def status_message(order: Order) -> str:
    return (
        f"{_store_name()}: Order #{order.id} update! "
        f"Your status is now: {order.delivery_status.value}. "
        f"Total: {_money(order.total_amount_cents)}. Thank you for shopping!"
    )


def reminder_message(order: Order) -> str:
    return (
        f"{_store_name()} Reminder: You have an outstanding balance of "
        f"{_money(order.balance_due_cents)} for Order #{order.id}. "
        f"Please complete your payment at your earliest convenience. Thank you!"
    )


def send_status_notification(state: DomainState, gateway: SmsGateway, order: Order) -> SMSLog | None:
    """Tell the customer the order's delivery status. Silent no-op without a phone."""
    customer = _customer_for(state, order)
    if customer is None or not customer.phone:
        return None

    entry = send_sms(state, gateway, customer.phone, status_message(order))
    add_log(state, "SMS Notification", f"Sent delivery update SMS for Order #{order.id}")
    return entry


def send_reminder_notification(state: DomainState, gateway: SmsGateway, order: Order) -> SMSLog | None:
    """Remind the customer of the outstanding balance. Silent no-op without a phone."""
    customer = _customer_for(state, order)
    if customer is None or not customer.phone:
        return None

    entry = send_sms(state, gateway, customer.phone, reminder_message(order))
    add_log(state, "Payment Reminder", f"Sent balance reminder SMS to {customer.name}")
    return entry


def send_all_reminders(state: DomainState, gateway: SmsGateway) -> list[SMSLog]:
    """Remind every order with a balance, one after another."""
    due_orders = [o for o in state.orders if o.payment_status is not PaymentStatus.PAID]
    sent = []
    for order in due_orders:
        entry = send_reminder_notification(state, gateway, order)
        if entry is not None:
            sent.append(entry)
    return sent
