"""Test settings: in-memory SQLite and a cheap bcrypt cost, applied before catalog is imported."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["APP_ENV"] = "dev"
os.environ["DB_CREATE_ALL"] = "false"
os.environ["SEED_SAMPLE_DATA"] = "false"
