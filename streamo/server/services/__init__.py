"""
Server services.

Business logic shared by the API routers and background tasks: authentication
dependencies, file storage, CSV import, royalty reconciliation and earnings,
analytics, mail and notifications.
"""
