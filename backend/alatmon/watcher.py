"""Streak watcher: the client that triggers history archival.

Polls the latest reading of one alat and, once the reading has stayed the same
for ``ALATMON_UNCHANGED_SECONDS`` (default 10), reports it through
``POST /history/save``. The server then archives the streak and clears the
live rows, so the next poll sees "Alat belum dihidupkan" until new readings
arrive.

Run:
    ALATMON_IDALAT=D123 python -m alatmon.watcher

Requires: requests
"""
import logging
import os
import sys
import time

import requests

API_BASE = os.getenv("ALATMON_API_BASE", "http://localhost:8000")
IDALAT = os.getenv("ALATMON_IDALAT", "")
UNCHANGED_SECONDS = int(os.getenv("ALATMON_UNCHANGED_SECONDS", "10"))
POLL_INTERVAL = float(os.getenv("ALATMON_POLL_INTERVAL", "1"))

logger = logging.getLogger(__name__)

# poll did not get an answer; not the same as a silent alat
POLL_FAILED = object()


class StreakWatcher:
    def __init__(self, threshold: int):
        self.threshold = threshold
        self.reading = None
        self.since = None
        self.reported = False

    def reset(self):
        self.reading = None
        self.since = None
        self.reported = False

    def observe(self, reading, now: float) -> int | None:
        """Feed one poll result; return the unchanged duration when it is due.

        Fires once per streak. ``None`` (device silent) ends the streak.
        """
        if reading is None:
            self.reset()
            return None
        if reading != self.reading:
            self.reading = reading
            self.since = now
            self.reported = False
            return None
        duration = int(now - self.since)
        if self.reported or duration < self.threshold:
            return None
        self.reported = True
        return duration


# --- HTTP helpers ---
def http_get(path):
    try:
        r = requests.get(API_BASE + path, timeout=5)
        r.raise_for_status()
        return r.json()
    except requests.RequestException as e:
        logger.warning("GET %s failed: %s", path, e)
        return None

def http_post(path, json_body):
    try:
        r = requests.post(API_BASE + path, json=json_body, timeout=5)
        r.raise_for_status()
        return r.json()
    except requests.RequestException as e:
        logger.warning("POST %s failed: %s", path, e)
        return None

def fetch_reading(idalat):
    """Latest payload, None when the alat has no live rows, POLL_FAILED on error."""
    body = http_get(f"/monitoring/latest/{idalat}")
    if body is None:
        return POLL_FAILED
    if "data" not in body:
        return None
    return body["data"].get("payload")

def save_history(idalat, duration):
    resp = http_post("/history/save", {"idalat": idalat, "duration": duration})
    if resp:
        logger.info("history saved for %s (%ss)", idalat, duration)
    return resp

def poll_once(watcher, idalat, now):
    reading = fetch_reading(idalat)
    if reading is POLL_FAILED:
        return None
    duration = watcher.observe(reading, now)
    if duration is not None:
        # no retry here; the next streak gets its own report
        save_history(idalat, duration)
    return duration


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    if not IDALAT:
        logger.error("ALATMON_IDALAT is not set")
        sys.exit(1)
    watcher = StreakWatcher(UNCHANGED_SECONDS)
    logger.info("watching %s, unchanged threshold %ss", IDALAT, UNCHANGED_SECONDS)
    try:
        while True:
            poll_once(watcher, IDALAT, time.monotonic())
            time.sleep(POLL_INTERVAL)
    except KeyboardInterrupt:
        logger.info("stopping")

if __name__ == "__main__":
    main()
