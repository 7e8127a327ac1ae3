"""Listing: prefix and directory modes, lazy pagination.

Demonstrates:
- Prefix listing (the default) within a directory
- Directory listing with virtual directory support enabled
- Progress callbacks on ranged reads

Uses the same AZFILE_* environment variables as quickstart.py.
"""

from __future__ import annotations

import io
import os

from azfile_store import ListMode, ObjectMode, new_storager

if __name__ == "__main__":
    storage = new_storager(
        endpoint=os.environ["AZFILE_ENDPOINT"],
        credential=os.environ["AZFILE_CREDENTIAL"],
        name=os.environ["AZFILE_SHARE"],
        work_dir="/",
        enable_virtual_dir=True,
    )

    with storage:
        for name in ("2024-01.log", "2024-02.log", "2025-01.log"):
            body = f"[INFO] {name}\n".encode()
            storage.write(name, body, len(body))

        # --- Prefix mode: names starting with "2024-" in the work dir ---
        print("2024 logs:", [obj.path for obj in storage.list("2024-")])

        # --- Directory mode: immediate children, directories first ---
        for obj in storage.list("", list_mode=ListMode.DIR):
            kind = "dir " if obj.mode is ObjectMode.DIR else "file"
            print(f"  {kind} {obj.path} {obj.content_length or ''}")

        # --- Ranged read with a progress callback ---
        received: list[int] = []
        sink = io.BytesIO()
        storage.read("2024-01.log", sink, offset=7, size=7, io_callback=received.append)
        print(f"\nRange: {sink.getvalue()!r}, {sum(received)} bytes reported")

        for name in ("2024-01.log", "2024-02.log", "2025-01.log"):
            storage.delete(name)

    print("\nDone!")
