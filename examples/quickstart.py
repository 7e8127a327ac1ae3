"""Quickstart: connect to a share, write, stat, and read a file.

Demonstrates:
- Creating a storage handle with new_storager()
- Writing bytes and reading them back
- Fetching object metadata with stat()

Set AZFILE_ENDPOINT (e.g. ``https:myaccount.file.core.windows.net``),
AZFILE_CREDENTIAL (``hmac:<account>:<key>``) and AZFILE_SHARE before running.
"""

from __future__ import annotations

import io
import os

from azfile_store import new_storager

if __name__ == "__main__":
    storage = new_storager(
        endpoint=os.environ["AZFILE_ENDPOINT"],
        credential=os.environ["AZFILE_CREDENTIAL"],
        name=os.environ["AZFILE_SHARE"],
    )

    with storage:
        # Write a file
        data = b"Hello, world!"
        storage.write("hello.txt", data, len(data))

        # Check metadata
        obj = storage.stat("hello.txt")
        print(f"Size: {obj.content_length} bytes")
        print(f"Modified: {obj.last_modified}")
        print(f"MD5: {obj.content_md5}")

        # Read it back
        sink = io.BytesIO()
        storage.read("hello.txt", sink)
        print(f"Content: {sink.getvalue()}")

        storage.delete("hello.txt")

    print("Done!")
