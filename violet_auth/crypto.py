"""
Symmetric encryption, hashing and random strings.

These are the primitives from which authorization codes, MAC tokens and
password verifiers are built. Keys are plain strings; the AES key is derived
from them with SHA-256 on every call, so nothing here holds state.
"""

import hashlib
import hmac
import math
import secrets

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .exceptions import DecryptionFailed

IV_LENGTH = 16
_DIGITS = '0123456789abcdefghijklmnopqrstuvwxyz'


def _derive_key(key: str) -> bytes:
    return hashlib.sha256(key.encode('utf-8')).digest()


def encrypt(plaintext: str, key: str) -> str:
    """
    Encrypt a string with AES-256-CFB.

    Parameters
    ----------
    plaintext : str
    key : str
        Secret from which the AES key is derived.

    Returns
    -------
    str
        Hex encoding of a fresh random IV followed by the ciphertext.

    """
    iv = secrets.token_bytes(IV_LENGTH)
    encryptor = Cipher(algorithms.AES(_derive_key(key)),
                       modes.CFB(iv)).encryptor()
    ciphertext = encryptor.update(plaintext.encode('utf-8')) \
        + encryptor.finalize()
    return (iv + ciphertext).hex()


def decrypt(envelope: str, key: str) -> str:
    """
    Decrypt a string produced by :func:`encrypt`.

    Raises
    ------
    :class:`DecryptionFailed`
        If ``envelope`` is not hex, is too short to hold an IV, or does not
        decrypt to UTF-8 text (which is what a wrong key usually produces).

    """
    try:
        contents = bytes.fromhex(envelope)
    except (TypeError, ValueError) as e:
        raise DecryptionFailed('Ciphertext is not hex encoded') from e
    if len(contents) < IV_LENGTH:
        raise DecryptionFailed('Ciphertext is too short')
    iv, ciphertext = contents[:IV_LENGTH], contents[IV_LENGTH:]
    decryptor = Cipher(algorithms.AES(_derive_key(key)),
                       modes.CFB(iv)).decryptor()
    data = decryptor.update(ciphertext) + decryptor.finalize()
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise DecryptionFailed('Plaintext is not valid UTF-8') from e


def hash(value: str) -> str:
    """Return the hex SHA-512 digest of ``value``."""
    return hashlib.sha512(value.encode('utf-8')).hexdigest()


def compare(a: str, b: str) -> bool:
    """Compare two strings in constant time."""
    return hmac.compare_digest(a.encode('utf-8'), b.encode('utf-8'))


def rand(bits: int) -> str:
    """
    Generate a random base-36 string holding ``bits`` bits of entropy.

    The result is zero-padded to the number of digits needed for ``bits``
    bits, so every call with the same ``bits`` yields the same length.
    """
    value = secrets.randbits(bits)
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_DIGITS[remainder])
    length = math.ceil(bits * math.log(2) / math.log(36))
    return ''.join(reversed(digits)).rjust(length, '0')
