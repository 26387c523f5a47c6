"""Global pytest configuration."""

import os

# Tests run against the in-memory store unless a suite builds its own engine
os.environ["DATABASE_URL"] = ""
