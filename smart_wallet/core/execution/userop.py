"""
ERC-4337 UserOperation models and helpers.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional


def _to_hex(value: int) -> str:
    return hex(value)


def _parse_hex(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    return int(value, 16)


def normalize_hex(data: Any) -> str:
    """Return byte-ish input as a 0x-prefixed lowercase hex string."""
    if data is None:
        return "0x"
    if isinstance(data, (bytes, bytearray)):
        return "0x" + bytes(data).hex()
    if isinstance(data, str):
        body = data[2:] if data.startswith(("0x", "0X")) else data
        if len(body) % 2 != 0:
            raise ValueError("Byte data must have an even-length hex string")
        try:
            bytes.fromhex(body)
        except ValueError as exc:
            raise ValueError(f"Invalid hex data: {data!r}") from exc
        return "0x" + body.lower()
    raise ValueError(f"Unsupported byte data type: {type(data).__name__}")


@dataclass(frozen=True)
class Call:
    """One atomic on-chain invocation made by the smart wallet."""

    to: str
    value: int = 0
    data: str = "0x"

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Call value must be non-negative")
        object.__setattr__(self, "data", normalize_hex(self.data))


@dataclass(frozen=True)
class UserOperation:
    """
    ERC-4337 UserOperation payload (EntryPoint v0.6 layout).

    Values are held in raw units (wei / gas units) and encoded as hex for RPC
    calls. Instances are immutable; population stages derive new ones with
    `with_fields`.
    """
    sender: str = "0x0000000000000000000000000000000000000000"
    nonce: int = 0
    init_code: str = "0x"
    call_data: str = "0x"
    call_gas_limit: int = 35000
    verification_gas_limit: int = 70000
    pre_verification_gas: int = 21000
    max_fee_per_gas: int = 0
    max_priority_fee_per_gas: int = 0
    paymaster_and_data: str = "0x"
    signature: str = "0x"

    def with_fields(self, **changes: Any) -> "UserOperation":
        return replace(self, **changes)

    def to_rpc_dict(self) -> Dict[str, Any]:
        return {
            "sender": self.sender,
            "nonce": _to_hex(self.nonce),
            "initCode": self.init_code,
            "callData": self.call_data,
            "callGasLimit": _to_hex(self.call_gas_limit),
            "verificationGasLimit": _to_hex(self.verification_gas_limit),
            "preVerificationGas": _to_hex(self.pre_verification_gas),
            "maxFeePerGas": _to_hex(self.max_fee_per_gas),
            "maxPriorityFeePerGas": _to_hex(self.max_priority_fee_per_gas),
            "paymasterAndData": self.paymaster_and_data,
            "signature": self.signature,
        }


@dataclass
class UserOpGasEstimate:
    call_gas_limit: int
    verification_gas_limit: int
    pre_verification_gas: int

    @classmethod
    def from_rpc(cls, data: Dict[str, Any]) -> "UserOpGasEstimate":
        return cls(
            call_gas_limit=_parse_hex(data.get("callGasLimit")) or 0,
            verification_gas_limit=_parse_hex(
                data.get("verificationGasLimit") or data.get("verificationGas")
            ) or 0,
            pre_verification_gas=_parse_hex(data.get("preVerificationGas")) or 0,
        )


@dataclass
class PaymasterSponsorship:
    """Paymaster response: sponsorship data plus any gas limits it re-estimated."""

    paymaster_and_data: str
    call_gas_limit: Optional[int] = None
    verification_gas_limit: Optional[int] = None
    pre_verification_gas: Optional[int] = None

    @classmethod
    def from_rpc(cls, data: Dict[str, Any]) -> "PaymasterSponsorship":
        return cls(
            paymaster_and_data=data.get("paymasterAndData") or data.get("paymaster_and_data") or "0x",
            call_gas_limit=_parse_hex(data.get("callGasLimit")),
            verification_gas_limit=_parse_hex(data.get("verificationGasLimit")),
            pre_verification_gas=_parse_hex(data.get("preVerificationGas")),
        )

    def gas_overrides(self) -> Dict[str, int]:
        overrides = {
            "call_gas_limit": self.call_gas_limit,
            "verification_gas_limit": self.verification_gas_limit,
            "pre_verification_gas": self.pre_verification_gas,
        }
        return {key: value for key, value in overrides.items() if value is not None}


@dataclass
class UserOpReceipt:
    user_op_hash: str
    success: bool
    transaction_hash: Optional[str] = None
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    reason: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_rpc(cls, user_op_hash: str, data: Dict[str, Any]) -> "UserOpReceipt":
        receipt = data.get("receipt") or {}
        success = data.get("success")
        if success is None:
            success = receipt.get("status") == "0x1"
        return cls(
            user_op_hash=user_op_hash,
            success=bool(success),
            transaction_hash=receipt.get("transactionHash"),
            block_number=_parse_hex(receipt.get("blockNumber")),
            gas_used=_parse_hex(data.get("actualGasUsed") or receipt.get("gasUsed")),
            reason=data.get("reason"),
            raw=data,
        )
