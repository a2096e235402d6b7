# fifo_inventory/core/enums/transaction_type.py

from enum import Enum

class TransactionType(str, Enum):
    """
    Defines the kinds of stock movement recorded in the transaction log.
    Inheriting from 'str' keeps the values directly comparable with string inputs.
    """
    ENTRY = "entry"   # stock received as a new lot
    OUTPUT = "output" # stock withdrawn through FIFO allocation

