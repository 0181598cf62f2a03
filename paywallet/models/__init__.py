# Models Package
from .user import User
from .offer import Offer
from .wallet import Wallet
from .bill import Bill
from .transaction import Transaction

__all__ = [
    "User",
    "Offer",
    "Wallet",
    "Bill",
    "Transaction"
]
