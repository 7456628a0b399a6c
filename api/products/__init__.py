"""
Product catalog feature: SQLite-backed store, validation rules and routes.
"""
