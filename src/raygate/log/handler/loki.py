import sys
import socket
import logging
import requests
import threading
from typing import Optional
from collections import deque
from typing import Deque, Dict, Any, List


class LokiHandler(logging.Handler):
    """
    A logging handler that pushes records to a Grafana Loki instance in
    batches, flushing from a background thread.
    """
    def __init__(self, url: str, org_id: Optional[str] = None, flush_interval: float = 10, batch_size: int = 200):
        """
        Initializes the Loki handler.

        :param url: The base URL of the Loki instance.
        :param org_id: The tenant ID for Loki (sent as 'X-Scope-OrgID').
        :param flush_interval: Seconds between periodic flushes.
        :param batch_size: Number of buffered records that triggers an immediate flush.
        """
        super().__init__()
        self.url = f"{url.rstrip('/')}/loki/api/v1/push"
        self.org_id = org_id
        self.flush_interval = flush_interval
        self.batch_size = batch_size
        self.log_buffer: Deque[Dict[str, Any]] = deque()
        self.buffer_lock = threading.Lock()
        self.hostname = socket.gethostname() or "unknown-host"

        self.stop_event = threading.Event()
        self.flush_thread = threading.Thread(target=self._periodic_flush, daemon=True)
        self.flush_thread.name = "LokiFlushThread"
        self.flush_thread.start()

    def _periodic_flush(self) -> None:
        """Flushes the buffer every `flush_interval` seconds until the handler is closed."""
        while not self.stop_event.wait(self.flush_interval):
            self.flush()
        self.flush()

    def build_entry(self, record: logging.LogRecord) -> Dict[str, Any]:
        """Builds the Loki stream entry for a single record."""
        return {
            "stream": {
                "job": "raygate",
                "level": record.levelname.lower(),
                "hostname": self.hostname,
                "logger": record.name,
            },
            "values": [
                [str(int(record.created * 1e9)), self.format(record)]
            ]
        }

    def emit(self, record: logging.LogRecord) -> None:
        """
        Formats a log record and adds it to the internal buffer.
        If the buffer reaches the batch size, it is flushed right away.

        :param record: The log record to be processed.
        """
        try:
            entry = self.build_entry(record)
            with self.buffer_lock:
                self.log_buffer.append(entry)
                pending = self._drain_locked() if len(self.log_buffer) >= self.batch_size else []
            self._send(pending)
        except Exception:
            self.handleError(record)

    def _drain_locked(self) -> List[Dict[str, Any]]:
        entries = list(self.log_buffer)
        self.log_buffer.clear()
        return entries

    def _send(self, entries: List[Dict[str, Any]]) -> None:
        """Pushes `entries` to Loki. Must be called without holding the buffer lock."""
        if not entries:
            return

        headers = {'Content-Type': 'application/json'}
        if self.org_id:
            headers['X-Scope-OrgID'] = self.org_id
        try:
            response = requests.post(self.url, json={"streams": entries}, headers=headers, timeout=5)
            # 204 No Content is the success status for Loki push
            if response.status_code != 204:
                print(
                    f"ERROR: Loki returned non-204 status: {response.status_code} - {response.text}",
                    file=sys.stderr
                )
        except requests.RequestException as e:
            print(f"CRITICAL: Failed to send {len(entries)} logs to Loki: {e}", file=sys.stderr)

    def flush(self) -> None:
        """Sends everything currently buffered."""
        with self.buffer_lock:
            entries = self._drain_locked()
        self._send(entries)

    def close(self) -> None:
        """
        Stops the flush thread, which performs a final flush, then closes the handler.
        """
        self.stop_event.set()
        if self.flush_thread.is_alive():
            self.flush_thread.join(timeout=self.flush_interval + 2)
        super().close()
