"""Endpoint and credential parsing plus the immutable StorageConfig."""

from __future__ import annotations

import dataclasses

from azfile_store._errors import InvalidPair, PairRequired, PairUnsupported
from azfile_store._features import Feature, FeatureSet
from azfile_store._pairs import OPERATION_PAIRS
from azfile_store._path import normalize_work_dir

_DEFAULT_PORTS = {"http": 80, "https": 443}
_CONFIG_KEYS = frozenset({"endpoint", "credential", "name", "work_dir", "default_pairs", "enable_virtual_dir"})
_BOOL_STRINGS = {"1": True, "t": True, "true": True, "0": False, "f": False, "false": False}


def parse_bool(value: object) -> bool | None:
    """Parse a bool or a boolean string (``"true"``, ``"0"``, ``"F"`` ...); anything else gives ``None``."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _BOOL_STRINGS.get(value.strip().lower())
    return None


@dataclasses.dataclass(frozen=True)
class Endpoint:
    """A parsed ``<protocol>:<host>[:<port>]`` endpoint string.

    :param protocol: ``"http"`` or ``"https"``.
    :param host: Host name, e.g. ``myaccount.file.core.windows.net``.
    :param port: TCP port.
    """

    protocol: str
    host: str
    port: int

    @classmethod
    def parse(cls, value: str) -> Endpoint:
        """Parse an endpoint string.

        :raises InvalidPair: If the string is malformed.
        :raises PairUnsupported: If the protocol is not http or https.
        """
        protocol, sep, rest = value.partition(":")
        if not sep or not rest:
            raise InvalidPair(pair="endpoint", value=value)
        if protocol not in _DEFAULT_PORTS:
            raise PairUnsupported(f"Endpoint protocol '{protocol}' is not supported", pair="endpoint", value=value)
        host, sep, port_str = rest.partition(":")
        if not host:
            raise InvalidPair(pair="endpoint", value=value)
        if not sep:
            return cls(protocol=protocol, host=host, port=_DEFAULT_PORTS[protocol])
        try:
            port = int(port_str)
        except ValueError:
            raise InvalidPair(pair="endpoint", value=value) from None
        return cls(protocol=protocol, host=host, port=port)

    @property
    def url(self) -> str:
        """Account URL for the SDK, omitting the protocol's default port."""
        if self.port == _DEFAULT_PORTS[self.protocol]:
            return f"{self.protocol}://{self.host}"
        return f"{self.protocol}://{self.host}:{self.port}"


@dataclasses.dataclass(frozen=True)
class Credential:
    """A parsed ``hmac:<account_name>:<account_key>`` shared-key credential.

    :param account_name: Storage account name.
    :param account_key: Storage account key.
    """

    account_name: str
    account_key: str = dataclasses.field(repr=False)

    @classmethod
    def parse(cls, value: str) -> Credential:
        """Parse a credential string.

        :raises InvalidPair: If the string is malformed.
        :raises PairUnsupported: If the protocol is not ``hmac``.
        """
        protocol, sep, rest = value.partition(":")
        if not sep:
            raise InvalidPair("Credential must look like '<protocol>:<value>'", pair="credential")
        if protocol != "hmac":
            raise PairUnsupported(f"Credential protocol '{protocol}' is not supported", pair="credential")
        name, sep, key = rest.partition(":")
        if not sep or not name or not key:
            raise InvalidPair("hmac credential must look like 'hmac:<account_name>:<account_key>'", pair="credential")
        return cls(account_name=name, account_key=key)


@dataclasses.dataclass(frozen=True)
class StorageConfig:
    """Describes one storage handle.

    :param endpoint: Parsed service endpoint.
    :param credential: Parsed shared-key credential.
    :param name: Share name.
    :param work_dir: Root directory all paths resolve under.
    :param default_pairs: Per-operation option defaults, keyed by operation name.
    :param features: Enabled features.
    """

    endpoint: Endpoint
    credential: Credential
    name: str
    work_dir: str = "/"
    default_pairs: dict[str, dict[str, object]] = dataclasses.field(default_factory=dict)
    features: FeatureSet = dataclasses.field(default_factory=FeatureSet)

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> StorageConfig:
        """Construct from a plain dict (e.g. parsed TOML/JSON or ``new_storager`` keywords).

        :param data: Dict with ``endpoint``, ``credential`` and ``name`` keys, and
            optionally ``work_dir``, ``default_pairs`` and ``enable_virtual_dir``.
        :raises PairRequired: If a required key is missing.
        :raises PairUnsupported: If an unknown key is present.
        :raises InvalidPair: If a value is malformed.
        """
        for key in data:
            if key not in _CONFIG_KEYS:
                raise PairUnsupported(pair=key, value=data[key])
        for key in ("endpoint", "credential", "name"):
            if not data.get(key):
                raise PairRequired(pair=key)
            if not isinstance(data[key], str):
                raise InvalidPair(pair=key, value=None if key == "credential" else data[key])

        raw_defaults = data.get("default_pairs") or {}
        if not isinstance(raw_defaults, dict):
            raise InvalidPair(pair="default_pairs", value=raw_defaults)
        default_pairs: dict[str, dict[str, object]] = {}
        for op, pairs in raw_defaults.items():
            if op not in OPERATION_PAIRS:
                raise InvalidPair(f"Unknown operation '{op}' in default pairs", pair="default_pairs")
            if not isinstance(pairs, dict):
                raise InvalidPair(f"Default pairs for '{op}' must be a dict", pair="default_pairs")
            default_pairs[str(op)] = dict(pairs)

        work_dir = data.get("work_dir", "/")
        if not isinstance(work_dir, str):
            raise InvalidPair(pair="work_dir", value=work_dir)

        raw_virtual_dir = data.get("enable_virtual_dir")
        enable_virtual_dir = False if raw_virtual_dir is None else parse_bool(raw_virtual_dir)
        if enable_virtual_dir is None:
            raise InvalidPair(pair="enable_virtual_dir", value=raw_virtual_dir)
        features = FeatureSet({Feature.VIRTUAL_DIR} if enable_virtual_dir else set())

        return cls(
            endpoint=Endpoint.parse(str(data["endpoint"])),
            credential=Credential.parse(str(data["credential"])),
            name=str(data["name"]),
            work_dir=normalize_work_dir(work_dir),
            default_pairs=default_pairs,
            features=features,
        )

