import os
import tempfile

# Keep settings and overrides away from the working tree during test runs.
os.environ.setdefault("RAYGATE_HOME", tempfile.mkdtemp(prefix="raygate-test-"))
os.environ.setdefault("LOKI_ENABLED", "false")
