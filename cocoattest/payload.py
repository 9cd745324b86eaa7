"""The decoded contents of a key unwrap request handed on to the agent."""

from __future__ import annotations

from dataclasses import dataclass

from cocoattest.message import KeyProviderInput
from cocoattest.pairing import get_annotation, get_kbc_kbs_pair


@dataclass(frozen=True)
class InputPayload:
    """KBC name, KBS URI (without a scheme prefix) and the decoded annotation.

    The agent expects the decryption config of the request to look like::

        "dc": {"Parameters": {"attestation-agent": ["<base64 of KBC_NAME::KBS_URI>"]}}
    """

    kbc_name: str = ""
    kbs_uri: str = ""
    annotation: str = ""

    @classmethod
    def from_input(cls, kpi: KeyProviderInput) -> "InputPayload":
        """Build a payload from an already parsed request."""
        annotation = get_annotation(kpi)
        kbc_name, kbs_uri = get_kbc_kbs_pair(kpi)
        return cls(kbc_name=kbc_name, kbs_uri=kbs_uri, annotation=annotation)

    @classmethod
    def from_bytes(cls, data: bytes) -> "InputPayload":
        """Decode and validate a JSON request, then build a payload from it."""
        return cls.from_input(KeyProviderInput.from_bytes(data))