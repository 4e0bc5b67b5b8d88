"""
MySQL connectivity smoke-test.

Waits for the configured database, makes sure the `books` table exists, upserts
a few static rows and prints them back. See `bookseed.app.main`.
"""
