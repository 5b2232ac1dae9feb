#!/usr/bin/env python3
"""
Smoke test against a live B2 bucket: upload, download, verify, delete.

Usage: b2_smoke.py [config.json]

Without a config file the B2_* environment variables (or a .env file) are used.
"""
import os
import sys

from dotenv import load_dotenv

from b2storage.common import B2Config, ServiceError, get_config, setup_logging
from b2storage.storage import B2Client, ObjectStoreClient

# ------------------------------------------------------------------
# CONFIGURATION
# ------------------------------------------------------------------
TEST_NAME = os.environ.get("B2_SMOKE_NAME", "testing.txt")
TEST_DATA = b"hello world"


def load_config(argv) -> B2Config:
    if len(argv) > 1:
        return B2Config.from_json_file(argv[1])
    load_dotenv()
    return get_config()


# ------------------------------------------------------------------
# SMOKE RUN
# ------------------------------------------------------------------
def run_smoke(client: ObjectStoreClient, name: str = TEST_NAME, data: bytes = TEST_DATA) -> bool:
    # 1: Upload data
    file_id = client.upload_file(name, data)
    print(f"OK: uploaded file ({file_id}).", flush=True)

    # 2: Download data
    download = client.download_file(file_id)
    print("OK: downloaded file.", flush=True)

    # 3: Verify data
    ok = download == data
    if not ok:
        print("FAILURE: downloaded data didn't match!", flush=True)
    else:
        print("OK: data uploaded/downloaded fine.", flush=True)

    # 4: Delete data
    client.delete_file(file_id)
    print("OK: deleted file.", flush=True)
    return ok


def main(argv=None) -> int:
    argv = sys.argv if argv is None else argv
    setup_logging(os.environ.get("LOG_LEVEL", "WARNING"), service_name="b2-smoke")

    try:
        config = load_config(argv)
        config.require_complete()
        ok = run_smoke(B2Client(config))
    except ServiceError as e:
        print(f"FAILURE: {type(e).__name__}: {e.message}", flush=True)
        return 1

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
