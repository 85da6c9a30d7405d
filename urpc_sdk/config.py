"""
Configuration for urpc clients and renderers.
"""
import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

DEFAULT_CALL_TYPE = "eth_call"
DEFAULT_BLOCK_TAG = "latest"
DEFAULT_TIMEOUT = 30
DEFAULT_TAG_PREFIX = "u"
DEFAULT_CACHE_MAXSIZE = 10_000
DEFAULT_ERROR_MARKER = "Error in RPC call"

# environment variable -> field name
_ENV_VARS = {
    "URPC_CALL_TYPE": "call_type",
    "URPC_BLOCK_TAG": "block_tag",
    "URPC_TIMEOUT": "timeout",
    "URPC_TAG_PREFIX": "tag_prefix",
    "URPC_CACHE_MAXSIZE": "cache_maxsize",
    "URPC_ERROR_MARKER": "error_marker",
}


@dataclass(frozen=True)
class URPCConfig:
    """
    Settings shared by the client and the document renderer.

    Attributes:
        call_type: JSON-RPC method used for calls (any read method with the
            ``[{to, data}, block]`` params shape)
        block_tag: Block parameter sent with every call
        timeout: HTTP timeout in seconds
        tag_prefix: Prefix of the document tags (``u`` gives ``u-url``,
            ``u-directory`` and ``u-c``)
        cache_maxsize: Maximum number of cached results
        error_marker: Text rendered in place of a failed call
    """
    call_type: str = DEFAULT_CALL_TYPE
    block_tag: str = DEFAULT_BLOCK_TAG
    timeout: int = DEFAULT_TIMEOUT
    tag_prefix: str = DEFAULT_TAG_PREFIX
    cache_maxsize: int = DEFAULT_CACHE_MAXSIZE
    error_marker: str = DEFAULT_ERROR_MARKER

    @property
    def endpoint_tag(self) -> str:
        return f"{self.tag_prefix}-url"

    @property
    def directory_tag(self) -> str:
        return f"{self.tag_prefix}-directory"

    @property
    def call_tag(self) -> str:
        return f"{self.tag_prefix}-c"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "URPCConfig":
        """
        Build a config from ``URPC_*`` environment variables.

        Unset variables keep their defaults.

        Raises:
            ValueError: If an integer setting cannot be parsed
        """
        env = os.environ if environ is None else environ
        types = {f.name: f.type for f in fields(cls)}
        values = {}
        for var, name in _ENV_VARS.items():
            raw = env.get(var)
            if raw is None or raw == "":
                continue
            if types[name] in (int, "int"):
                try:
                    values[name] = int(raw)
                except ValueError:
                    raise ValueError(f"{var} must be an integer (got: {raw!r})") from None
            else:
                values[name] = raw
        return cls(**values)
