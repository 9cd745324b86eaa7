"""Extraction of the annotation and the KBC/KBS pair from a key provider request."""

from __future__ import annotations

import base64
import binascii

from cocoattest.message import (
    AGENT_NAME,
    ERR_ANNOTATION_EMPTY,
    KeyProviderInput,
    MessageError,
)

ERR_ANNOTATION_NOT_BASE64 = "annotation is not base64 encoded"
ERR_DC_EMPTY = "missing Dc value"
ERR_KBC_KBS_NOT_BASE64 = "KBC/KBS pair not base64 encoded"
ERR_KBC_KBS_NOT_FOUND = "KBC/KBS pair not found"
ERR_NO_KBC_NAME = "missing KBC name"
ERR_NO_KBS_URI = "missing KBS URI"
ERR_WRONG_DC_PARAM = "Dc parameter not destined for agent"

KBC_KBS_PAIR_SEP = "::"


class PayloadError(MessageError):
    """Raised when a key unwrap request cannot be turned into a payload."""


def _b64decode(value: str, error: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise PayloadError(f"{error}: {exc!r}") from exc


def _utf8(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise PayloadError(str(exc)) from exc


def get_annotation(kpi: KeyProviderInput) -> str:
    """Return the decoded annotation carried by the unwrap parameters."""
    encoded = kpi.keyunwrapparams.annotation
    if encoded is None:
        raise PayloadError(ERR_ANNOTATION_EMPTY)
    annotation = _utf8(_b64decode(encoded, ERR_ANNOTATION_NOT_BASE64))
    if not annotation:
        raise PayloadError(ERR_ANNOTATION_EMPTY)
    return annotation


def get_kbc_kbs_pair(kpi: KeyProviderInput) -> tuple[str, str]:
    """Return the (KBC name, KBS URI) pair the decryption config names for the agent."""
    dc = kpi.keyunwrapparams.dc
    if dc is None:
        raise PayloadError(ERR_DC_EMPTY)
    values = dc.parameters.get(AGENT_NAME)
    if values is None:
        raise PayloadError(ERR_WRONG_DC_PARAM)
    if not values:
        raise PayloadError(ERR_DC_EMPTY)
    pair = _utf8(_b64decode(values[0], ERR_KBC_KBS_NOT_BASE64))
    return str_to_kbc_kbs(pair)


def str_to_kbc_kbs(value: str) -> tuple[str, str]:
    """Split ``<kbc>::<kbs uri>`` at the first separator."""
    kbc_name, sep, kbs_uri = value.partition(KBC_KBS_PAIR_SEP)
    if not sep:
        raise PayloadError(ERR_KBC_KBS_NOT_FOUND)
    if not kbc_name:
        raise PayloadError(ERR_NO_KBC_NAME)
    if not kbs_uri:
        raise PayloadError(ERR_NO_KBS_URI)
    return kbc_name, kbs_uri