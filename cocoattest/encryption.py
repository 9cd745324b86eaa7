"""Encryption of image layer option data and generation of its annotation."""

from __future__ import annotations

import base64
import json
import logging
import os
import uuid
from dataclasses import dataclass
from typing import Optional, Sequence

from cocoattest import crypto
from cocoattest.crypto import Algorithm

log = logging.getLogger(__name__)

HARD_CODED_KEYID = "kbs:///default/test-key/1"
# Prefix of the key id given to a randomly generated KEK.
DEFAULT_KEY_REPO_PATH = "/default/image-kek"
KBS_RESOURCE_URL_PREFIX = "kbs://"

_IV_SIZE = 12
_KEY_SIZE = 32


class EncryptionError(Exception):
    """Raised when the option data cannot be encrypted or annotated."""


@dataclass(frozen=True)
class AnnotationPacket:
    """What the attestation-agent key provider annotation of an encrypted layer holds."""

    kid: str
    wrapped_data: str
    iv: str
    wrap_type: str

    def to_json(self) -> str:
        return json.dumps(
            {
                "kid": self.kid,
                "wrapped_data": self.wrapped_data,
                "iv": self.iv,
                "wrap_type": self.wrap_type,
            },
            separators=(",", ":"),
            ensure_ascii=False,
        )


@dataclass(frozen=True)
class InputParams:
    """Parameters of an encryption request.

    ``sample`` makes the hard-coded key and IV be used and ``keypath`` ignored;
    ``keyid`` names the KEK; ``keypath`` points at a 32-byte KEK on disk.
    """

    sample: bool = False
    keyid: Optional[str] = None
    keypath: Optional[str] = None
    algorithm: Algorithm = Algorithm.A256GCM


def parse_input_params(text: str) -> InputParams:
    """Parse ``<key1>=<value1>::<key2>=<value2>::...``."""
    fields: dict[str, str] = {}
    for item in text.split("::"):
        key, sep, value = item.partition("=")
        if sep:
            fields[key] = value
    log.debug("Get new request: %r", fields)

    sample = fields.get("sample") == "true"
    keypath = fields.get("keypath")
    # The algorithm is looked up from the keypath entry.
    algorithm = Algorithm.A256GCM
    if keypath is not None:
        try:
            algorithm = Algorithm.parse(keypath)
        except ValueError:
            algorithm = Algorithm.A256GCM
    return InputParams(
        sample=sample,
        keyid=fields.get("keyid"),
        keypath=keypath,
        algorithm=algorithm,
    )


def _key_id(input_params: InputParams) -> str:
    if input_params.keyid is not None:
        return input_params.keyid
    log.debug("no kid input, generate a random kid")
    return f"{DEFAULT_KEY_REPO_PATH}/{uuid.uuid4()}"


def generate_key_parameters(input_params: InputParams) -> tuple[bytes, bytes, str]:
    """Return ``(key, iv, keyid)`` for the given parameters."""
    if input_params.sample:
        log.info("Use sample keyprovider (HARDCODED KEY and IV)")
        return crypto.HARDCODED_KEY, bytes(_IV_SIZE), HARD_CODED_KEYID

    if input_params.keypath is not None:
        log.debug("use given key from: %s", input_params.keypath)
        try:
            with open(input_params.keypath, "rb") as handle:
                key = handle.read()
        except OSError as exc:
            raise EncryptionError(f"read Key file failed: {exc}") from exc
        return key, os.urandom(_IV_SIZE), _key_id(input_params)

    log.debug("no key input, generate a random key")
    iv = os.urandom(_IV_SIZE)
    key = os.urandom(_KEY_SIZE)
    return key, iv, _key_id(input_params)


def normalize_path(keyid: str) -> tuple[str, str]:
    """Split a key id into ``(kbs address, <repository>/<type>/<tag>)``."""
    log.debug("normalize key id %s", keyid)
    path = keyid[len(KBS_RESOURCE_URL_PREFIX):] if keyid.startswith(KBS_RESOURCE_URL_PREFIX) else keyid
    values = path.split("/")
    if len(values) != 4:
        raise EncryptionError(
            f"Resource path {keyid} must follow one of the following formats:\n"
            "    'kbs:///<repository>/<type>/<tag>'\n"
            "    'kbs://<kbs-addr>/<repository>/<type>/<tag>'\n"
            "    '<kbs-addr>/<repository>/<type>/<tag>'\n"
            "    '/<repository>/<type>/<tag>'"
        )
    addr, repository, kind, tag = values
    return addr, f"{repository}/{kind}/{tag}"


def enc_optsdata_gen_anno(optsdata: bytes, params: Sequence[str]) -> str:
    """Encrypt ``optsdata`` and return the JSON annotation packet.

    Only the first element of ``params`` is read; it holds ``::``-separated
    ``key=value`` pairs: ``sample``, ``keyid``, ``keypath`` and ``algorithm``.
    """
    if not params:
        raise EncryptionError("no encryption parameters given")
    input_params = parse_input_params(params[0])
    try:
        key, iv, kid = generate_key_parameters(input_params)
    except EncryptionError as exc:
        raise EncryptionError(f"generating key params: {exc}") from exc

    kbs_addr, key_path = normalize_path(kid)

    algorithm = input_params.algorithm
    try:
        wrapped = crypto.encrypt(optsdata, key, iv, algorithm)
    except ValueError as exc:
        raise EncryptionError(f"Encrypt failed: {exc}") from exc

    packet = AnnotationPacket(
        kid=f"{KBS_RESOURCE_URL_PREFIX}{kbs_addr}/{key_path}",
        wrapped_data=base64.b64encode(wrapped).decode("ascii"),
        iv=base64.b64encode(iv).decode("ascii"),
        wrap_type=str(algorithm),
    )
    return packet.to_json()