"""
UserOperation calldata builders and hashing.

Fixed-layout calls are encoded word by word; anything with dynamic arrays
goes through eth_abi.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from eth_abi import decode, encode
from eth_utils import keccak, to_checksum_address

from .userop import Call, UserOperation, normalize_hex


EXECUTE_SIGNATURE = "execute(address,uint256,bytes)"
EXECUTE_BATCH_SIGNATURE = "executeBatch(address[],uint256[],bytes[])"
CREATE_ACCOUNT_SIGNATURE = "createAccount(address,uint256)"
SENDER_ADDRESS_RESULT_SIGNATURE = "SenderAddressResult(address)"

MAX_UINT256 = 2**256 - 1
MAX_NONCE_KEY = 2**192 - 1


def _strip_0x(value: str) -> str:
    return value[2:] if value.startswith("0x") else value


def _encode_uint(value: int) -> str:
    if value < 0:
        raise ValueError("Value must be non-negative")
    if value > MAX_UINT256:
        raise ValueError("Value does not fit in uint256")
    return hex(value)[2:].rjust(64, "0")


def _encode_address(address: str) -> str:
    addr = _strip_0x(address).lower()
    if len(addr) != 40:
        raise ValueError(f"Invalid address length: {address}")
    return addr.rjust(64, "0")


def _encode_bytes(data: str) -> str:
    hex_data = _strip_0x(normalize_hex(data))
    data_len = len(hex_data) // 2
    padded_len = ((data_len + 31) // 32) * 32
    padding = "0" * ((padded_len - data_len) * 2)
    return _encode_uint(data_len) + hex_data + padding


def _to_bytes(data: str) -> bytes:
    return bytes.fromhex(_strip_0x(normalize_hex(data)))


def selector_from_signature(signature: str) -> str:
    selector = keccak(text=signature)[:4].hex()
    return f"0x{selector}"


def build_execute_call_data(to_address: str, value_wei: int, data: str) -> str:
    """
    Build calldata for execute(address,uint256,bytes).
    """
    selector = selector_from_signature(EXECUTE_SIGNATURE)
    head = (
        _encode_address(to_address)
        + _encode_uint(value_wei)
        + _encode_uint(96)  # offset to bytes data
    )
    tail = _encode_bytes(data)
    return selector + head + tail


def build_execute_batch_call_data(calls: Sequence[Call]) -> str:
    """
    Build calldata for executeBatch(address[],uint256[],bytes[]).

    Call order is preserved; the wallet runs the batch atomically.
    """
    if not calls:
        raise ValueError("executeBatch requires at least one call")
    encoded = encode(
        ["address[]", "uint256[]", "bytes[]"],
        [
            [to_checksum_address(call.to) for call in calls],
            [call.value for call in calls],
            [_to_bytes(call.data) for call in calls],
        ],
    )
    return selector_from_signature(EXECUTE_BATCH_SIGNATURE) + encoded.hex()


def build_call_data(calls: Iterable[Call], batch: Optional[bool] = None) -> str:
    """Single call -> execute, several -> executeBatch. `batch=True` forces executeBatch."""
    calls = list(calls)
    if not calls:
        raise ValueError("At least one call is required")
    if batch is None:
        batch = len(calls) > 1
    if not batch:
        if len(calls) > 1:
            raise ValueError("Multiple calls must be submitted as a batch")
        call = calls[0]
        return build_execute_call_data(call.to, call.value, call.data)
    return build_execute_batch_call_data(calls)


def build_entrypoint_get_nonce_call(sender: str, key: int = 0) -> str:
    """
    Build calldata for EntryPoint.getNonce(address,uint192).
    """
    if key < 0 or key > MAX_NONCE_KEY:
        raise ValueError("Nonce key must fit in uint192")
    selector = selector_from_signature("getNonce(address,uint192)")
    head = _encode_address(sender) + _encode_uint(key)
    return selector + head


def build_get_sender_address_call(init_code: str) -> str:
    """
    Build calldata for EntryPoint.getSenderAddress(bytes).
    """
    selector = selector_from_signature("getSenderAddress(bytes)")
    return selector + _encode_uint(32) + _encode_bytes(init_code)


def build_init_code(factory: str, owner: str, salt: int = 0) -> str:
    """factory address followed by createAccount(owner, salt) calldata."""
    create_account = (
        selector_from_signature(CREATE_ACCOUNT_SIGNATURE)
        + _encode_address(owner)
        + _encode_uint(salt)
    )
    return "0x" + _strip_0x(factory).lower() + _strip_0x(create_account)


def decode_sender_address_result(revert_data: str) -> str:
    """
    Extract the sender from a SenderAddressResult(address) revert payload.

    Raises ValueError if the payload is some other revert.
    """
    data = normalize_hex(revert_data)
    expected = selector_from_signature(SENDER_ADDRESS_RESULT_SIGNATURE)
    if not data.startswith(expected) or len(data) < len(expected) + 64:
        raise ValueError(f"Revert data is not SenderAddressResult: {revert_data}")
    (sender,) = decode(["address"], bytes.fromhex(data[len(expected):]))
    return to_checksum_address(sender)


def build_erc20_approve_call_data(spender: str, amount: int) -> str:
    return selector_from_signature("approve(address,uint256)") + _encode_address(spender) + _encode_uint(amount)


def build_erc20_transfer_call_data(recipient: str, amount: int) -> str:
    return selector_from_signature("transfer(address,uint256)") + _encode_address(recipient) + _encode_uint(amount)


def build_erc20_allowance_call_data(owner: str, spender: str) -> str:
    return selector_from_signature("allowance(address,address)") + _encode_address(owner) + _encode_address(spender)


def build_erc20_balance_of_call_data(owner: str) -> str:
    return selector_from_signature("balanceOf(address)") + _encode_address(owner)


def build_erc721_approve_call_data(spender: str, token_id: int) -> str:
    return selector_from_signature("approve(address,uint256)") + _encode_address(spender) + _encode_uint(token_id)


def build_erc721_safe_transfer_from_call_data(sender: str, recipient: str, token_id: int) -> str:
    return (
        selector_from_signature("safeTransferFrom(address,address,uint256)")
        + _encode_address(sender)
        + _encode_address(recipient)
        + _encode_uint(token_id)
    )


def pack_user_operation(user_op: UserOperation) -> bytes:
    """ABI-encode the signed fields of a v0.6 UserOperation, hashing dynamic ones."""
    return encode(
        [
            "address",
            "uint256",
            "bytes32",
            "bytes32",
            "uint256",
            "uint256",
            "uint256",
            "uint256",
            "uint256",
            "bytes32",
        ],
        [
            to_checksum_address(user_op.sender),
            user_op.nonce,
            keccak(_to_bytes(user_op.init_code)),
            keccak(_to_bytes(user_op.call_data)),
            user_op.call_gas_limit,
            user_op.verification_gas_limit,
            user_op.pre_verification_gas,
            user_op.max_fee_per_gas,
            user_op.max_priority_fee_per_gas,
            keccak(_to_bytes(user_op.paymaster_and_data)),
        ],
    )


def get_user_op_hash(user_op: UserOperation, entry_point: str, chain_id: int) -> bytes:
    """keccak(abi.encode(keccak(pack(op)), entryPoint, chainId))."""
    return keccak(
        encode(
            ["bytes32", "address", "uint256"],
            [keccak(pack_user_operation(user_op)), to_checksum_address(entry_point), chain_id],
        )
    )
