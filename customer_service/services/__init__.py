from .auth import AuthService
from .customers import CustomerService

__all__ = ["AuthService", "CustomerService"]
