"""ShelfCure notification service.

Generates store-scoped inventory and messaging alerts, persists them and
pushes them to connected store panels in real time.
"""
