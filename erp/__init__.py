"""
ERP Core - customers, products, orders & inventory ledger
"""
