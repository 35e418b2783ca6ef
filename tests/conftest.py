import os

# Keep the app's own startup hook off the on-disk default database.
os.environ.setdefault("FARMSTAND_DATABASE_URL", "sqlite://")
os.environ.setdefault("FARMSTAND_LOG_LEVEL", "WARNING")
