"""Error handling: catching NotFound, Unsupported, InitError, etc.

Demonstrates the normalized error hierarchy and how to handle errors
programmatically using structured attributes.

Uses the same AZFILE_* environment variables as quickstart.py.
"""

from __future__ import annotations

import io
import os

from azfile_store import (
    CapabilityNotSupported,
    InitError,
    ListModeInvalid,
    NotFound,
    PairUnsupported,
    StoreError,
    new_storager,
)

if __name__ == "__main__":
    # --- InitError: raised by new_storager, secrets redacted ---
    try:
        new_storager(endpoint="ftp:example.com", credential="hmac:acct:c2VjcmV0", name="share")
    except InitError as exc:
        print(f"InitError: {exc}")
        print(f"  cause={type(exc.err).__name__}, pairs={exc.pairs}")

    storage = new_storager(
        endpoint=os.environ["AZFILE_ENDPOINT"],
        credential=os.environ["AZFILE_CREDENTIAL"],
        name=os.environ["AZFILE_SHARE"],
    )

    with storage:
        # --- NotFound ---
        try:
            storage.stat("nonexistent.txt")
        except NotFound as exc:
            print(f"\nNotFound: {exc}")
            print(f"  op={exc.op}, path={exc.path}, backend={exc.backend}")
            print(f"  cause={exc.__cause__!r}")

        # --- delete is idempotent ---
        storage.delete("nonexistent.txt")
        print("\ndelete() of a missing file succeeded silently.")

        # --- Directory operations need enable_virtual_dir ---
        try:
            storage.stat("some-dir", object_mode="dir")
        except CapabilityNotSupported as exc:
            print(f"\nCapabilityNotSupported: {exc}")
            print(f"  capability={exc.capability}")

        # --- Options are checked per operation ---
        try:
            storage.stat("a.txt", offset=10)
        except PairUnsupported as exc:
            print(f"\nPairUnsupported: {exc}")

        try:
            storage.list("", list_mode="block")
        except ListModeInvalid as exc:
            print(f"\nListModeInvalid: {exc}")

        # --- Catch any azfile_store error with the base class ---
        for path in ["missing.txt", "missing/dir/file.txt"]:
            try:
                storage.read(path, io.BytesIO())
            except StoreError as exc:
                print(f"\nStoreError ({type(exc).__name__}): {exc}")

    print("\nDone!")
