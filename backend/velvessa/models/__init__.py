from .storage import KeyValueEntry
from .entities import (
    UserRole, UserStatus, Category, PaymentStatus, DeliveryStatus,
    SMS_SENT, SMS_FAILED,
    User, StockItem, Customer, CustomerInput, OrderItem, Order,
    PaymentRecord, AuditLog, SMSLog,
    new_id,
)

__all__ = [
    'KeyValueEntry',
    'UserRole', 'UserStatus', 'Category', 'PaymentStatus', 'DeliveryStatus',
    'SMS_SENT', 'SMS_FAILED',
    'User', 'StockItem', 'Customer', 'CustomerInput', 'OrderItem', 'Order',
    'PaymentRecord', 'AuditLog', 'SMSLog',
    'new_id',
]
