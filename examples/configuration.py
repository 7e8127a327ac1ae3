"""Configuration: from_dict(), default pairs, and validation errors.

Demonstrates building a StorageConfig from a plain dict (e.g. loaded from
TOML or JSON) and how malformed options are reported. Nothing here
contacts the service.
"""

from __future__ import annotations

from azfile_store import Feature, InitError, InvalidPair, PairRequired, Storage, StorageConfig, new_storager

if __name__ == "__main__":
    raw = {
        "endpoint": "https:myaccount.file.core.windows.net",
        "credential": "hmac:myaccount:bXktYWNjb3VudC1rZXk=",
        "name": "reports",
        "work_dir": "monthly",
        "default_pairs": {"list": {"list_mode": "dir"}, "read": {"timeout": 30}},
        "enable_virtual_dir": True,
    }

    # --- Option 1: from_dict() and Storage.from_config() ---
    config = StorageConfig.from_dict(raw)
    print(f"Account URL: {config.endpoint.url}")
    print(f"Credential:  {config.credential}")
    print(f"Work dir:    {config.work_dir}")
    print(f"Virtual dir: {config.features.supports(Feature.VIRTUAL_DIR)}")

    with Storage.from_config(config) as storage:
        print(f"Handle:      {storage!r}")
        print(f"Metadata:    {storage.metadata()}")

    # --- Option 2: new_storager() keywords ---
    with new_storager(**raw) as storage:
        print(f"\nnew_storager(): {storage!r}")

    # --- Validation errors ---
    try:
        StorageConfig.from_dict({"endpoint": "https:host", "name": "share"})
    except PairRequired as exc:
        print(f"\nPairRequired: {exc}")

    try:
        StorageConfig.from_dict({**raw, "endpoint": "https:host:not-a-port"})
    except InvalidPair as exc:
        print(f"InvalidPair: {exc}")

    try:
        new_storager(**{**raw, "default_pairs": {"rename": {}}})
    except InitError as exc:
        print(f"InitError: {exc}")

    print("\nDone!")
