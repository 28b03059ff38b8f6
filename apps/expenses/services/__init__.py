"""
Ledger services: split allocation, balances, debt simplification and
member redistribution, plus the ORM bridge in ``ledger``.
"""
