"""
Data models for the urpc SDK.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

SIGIL = "$"


def strip_sigil(value: str) -> str:
    """Remove a leading sigil from a reference, if present."""
    return value[len(SIGIL):] if value.startswith(SIGIL) else value


class CallDescriptor(BaseModel):
    """A call site as written: `to.method(args).decimals`, references unresolved"""
    raw_text: str
    to: str
    method: str
    args: List[str] = Field(default_factory=list)
    decimals: Optional[str] = None
    key: Optional[str] = None

    @property
    def method_name(self) -> str:
        return strip_sigil(self.method)

    @property
    def method_signature(self) -> str:
        """
        Signature used to look up the selector.

        Every argument is declared as `address`, whatever it means.
        """
        return f"{self.method_name}({','.join('address' for _ in self.args)})"

    def to_call_string(self) -> str:
        text = f"{self.to}.{self.method}({','.join(self.args)})"
        if self.decimals is not None:
            text += f".{self.decimals}"
        return text


class ResolvedCall(BaseModel):
    """A call with every reference replaced by its directory value"""
    to: str
    selector: str
    method_signature: str
    args: List[str] = Field(default_factory=list)
    decimals: Optional[int] = None
    call_type: str = "eth_call"


class RpcRequest(BaseModel):
    """JSON-RPC 2.0 request envelope"""
    jsonrpc: str = "2.0"
    id: int = 1
    method: str
    params: List[Any]

    @classmethod
    def for_call(cls, call_type: str, target: str, calldata: str, block_tag: str = "latest") -> "RpcRequest":
        return cls(method=call_type, params=[{"to": target, "data": calldata}, block_tag])


class RpcErrorObject(BaseModel):
    """Error member of a JSON-RPC response"""
    code: Optional[int] = None
    message: str = ""
    data: Optional[Any] = None


class RpcResponse(BaseModel):
    """JSON-RPC 2.0 response envelope"""
    jsonrpc: Optional[str] = None
    id: Optional[Any] = None
    result: Optional[Any] = None
    error: Optional[RpcErrorObject] = None


class CallResult(BaseModel):
    """Outcome of one call site in a batch render"""
    key: str
    call_string: str
    call: Optional[CallDescriptor] = None
    resolved: Optional[ResolvedCall] = None
    result: Optional[str] = None
    display_value: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RenderResult(BaseModel):
    """Rewritten document plus the per-key result map"""
    rendered_text: str
    results_by_key: Dict[str, CallResult] = Field(default_factory=dict)
