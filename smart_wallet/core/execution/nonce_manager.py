"""
Nonce key sequencing for concurrent UserOperations.

EntryPoint nonces are `key << 64 | sequence`. Operations sent under
different keys never contend for the same sequence number, so handing out a
fresh key per operation lets one wallet keep several operations in flight.
Operations that share a key must still be mined in the order they were
issued; that is left to the caller.
"""


class NonceSequencer:
    """Hands out strictly increasing nonce keys, starting at 0 after the first increment."""

    def __init__(self) -> None:
        self._nonce_key = -1

    def increment(self) -> None:
        self._nonce_key += 1

    def retrieve(self) -> int:
        return self._nonce_key
