"""
This module contains the configuration settings for the raygate application.
It defines paths, external service commands and logging configuration.
It is used throughout the application to ensure consistent settings and paths.
"""

import os
import pathlib
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv(override=True)

#* --- Core Paths ---
BASE_DIR = pathlib.Path(os.getenv("RAYGATE_HOME", pathlib.Path.cwd())).resolve()
CONF_DIR = BASE_DIR / "conf"
LOGS_DIR = BASE_DIR / "logs"

#* --- Application File Paths ---
OVERRIDES_JSON_PATH = CONF_DIR / "overrides.json"
SIMPLIFIED_CONFIG_PATH = pathlib.Path(os.getenv("SIMPLIFIED_CONFIG_PATH", str(CONF_DIR / "raygate.yml")))

#* --- V2Ray Settings ---
# The daemon reads this file on its own startup/reload; it is fully rewritten on every apply.
V2RAY_CONFIG_PATH = pathlib.Path(os.getenv("V2RAY_CONFIG_PATH", "/usr/local/etc/v2ray/config.json"))

#* --- Nginx Settings ---
NGINX_EXECUTABLE_PATH = pathlib.Path(os.getenv("NGINX_EXECUTABLE_PATH", "/usr/sbin/nginx"))
# Empty means the process table is enumerated through psutil.
NGINX_STATUS_COMMAND = os.getenv("NGINX_STATUS_COMMAND", "")

#* --- Logging Settings ---
VERBOSE_LOGGING = False
LOG_BUFFER_FLUSH_INTERVAL = 10
LOG_BUFFER_BATCH_SIZE = 200

# Grafana Loki (for observability)
LOKI_ENABLED = os.getenv("LOKI_ENABLED", "False").lower() in ('true', '1', 't')
LOKI_URL = os.getenv("LOKI_URL", "http://localhost:3100")
LOKI_ORG_ID = os.getenv("LOKI_ORG_ID", "")

#* --- MODIFIABLE SETTINGS (Changeable at runtime via 'config' command) ---
MODIFIABLE_SETTINGS = {
    "V2RAY_CONFIG_PATH", "SIMPLIFIED_CONFIG_PATH",
    "NGINX_EXECUTABLE_PATH", "NGINX_STATUS_COMMAND",
    "LOG_BUFFER_FLUSH_INTERVAL", "LOG_BUFFER_BATCH_SIZE",
}
