from .auth import User, SessionToken
from .catalog import Product
from .payments import Payment, AdminRequest
from .audit import ActivityLog
from .settings import SystemSetting, WarningBanner

__all__ = [
    'User', 'SessionToken',
    'Product',
    'Payment', 'AdminRequest',
    'ActivityLog',
    'SystemSetting', 'WarningBanner',
]
