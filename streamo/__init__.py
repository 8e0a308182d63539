"""Streamo.

Back-office API for a music distribution service.

Artists and labels register, upload their catalogue (releases, tracks and
videos) and request payouts. Staff review submissions, import distributor
royalty reports from CSV, link the imported transactions to their owners by
ISRC and manage basic site settings.

Core subpackages
----------------

- ``streamo.core``:

  - Logging and monitoring configuration.
  - Password hashing, token issuing and one-time codes.
  - SQLModel entities, async repositories and API I/O models.

- ``streamo.server``:

  - The FastAPI application, its routers and middleware.
  - Services for CSV import, ISRC reconciliation, earnings, analytics,
    file storage, mail and notifications.
"""
