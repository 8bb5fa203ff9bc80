"""
Data layer: models (``dispatch_rules.data.models``) and the store
contract (``dispatch_rules.data.store``).
"""
