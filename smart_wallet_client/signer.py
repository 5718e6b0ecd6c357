"""
Key handling and signing of the authentication payload.
"""

import logging

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import keccak, to_bytes, to_hex

from smart_wallet_client.exceptions import SignatureError
from smart_wallet_client.types import AuthPayload

logger = logging.getLogger(__name__)


def recover_address(hash_hex: str, signature: str) -> str:
    """Recover the signer address of a personal-message signature over a hash.

    Args:
        hash_hex: The signed 32-byte hash as a 0x-prefixed hex string.
        signature: The 65-byte signature as a hex string.

    Returns:
        The checksummed signer address.

    Raises:
        SignatureError: If the signature cannot be decoded.
    """
    signable = encode_defunct(primitive=to_bytes(hexstr=hash_hex))
    try:
        return Account.recover_message(signable, signature=signature)
    except Exception as e:
        raise SignatureError(f"Failed to recover signer: {e}") from e


class Signer:
    """Holds the owner private key and produces the auth payload."""

    def __init__(self, private_key: str) -> None:
        """Initialize the signer.

        Args:
            private_key: The owner private key, hex encoded, with or without 0x.

        Raises:
            SignatureError: If the private key is malformed.
        """
        if not private_key:
            raise SignatureError("Private key is empty")
        if private_key.startswith("0x"):
            private_key = private_key[2:]
        try:
            self._account = Account.from_key(private_key)
        except Exception as e:
            # never echo the key
            raise SignatureError(f"Invalid private key: {type(e).__name__}") from e

    def __repr__(self) -> str:
        return f"Signer(address={self.address!r})"

    @property
    def address(self) -> str:
        """Get the checksummed owner address."""
        return self._account.address

    def address_hash(self) -> str:
        """Get keccak256 of the raw 20 address bytes, 0x-prefixed."""
        return to_hex(keccak(to_bytes(hexstr=self.address)))

    def sign_hash(self, hash_hex: str) -> str:
        """Sign a 32-byte hash as an EIP-191 personal message.

        Args:
            hash_hex: The hash as a 0x-prefixed hex string.

        Returns:
            The 0x-prefixed signature.
        """
        signable = encode_defunct(primitive=to_bytes(hexstr=hash_hex))
        signed = self._account.sign_message(signable)
        return to_hex(signed.signature)

    def sign_auth_payload(self) -> AuthPayload:
        """Build the payload proving ownership of the address.

        The signer address is recovered from the signature and must match the
        derived address before the payload is returned.

        Returns:
            The hash, signature and recovered owner address.

        Raises:
            SignatureError: If the recovered address does not match.
        """
        hash_hex = self.address_hash()
        signature = self.sign_hash(hash_hex)
        recovered = recover_address(hash_hex, signature)
        if recovered != self.address:
            raise SignatureError(
                f"Recovered address {recovered} does not match {self.address}"
            )

        logger.debug("Signed auth payload for %s", recovered)
        return AuthPayload(hash=hash_hex, signature=signature, owner_address=recovered)


def create_signer(private_key: str) -> Signer:
    """Create a signer from a hex private key."""
    return Signer(private_key)
