"""TEE detection and evidence collection."""

from __future__ import annotations

import json
import os
from abc import ABC, abstractmethod
from enum import Enum

SAMPLE_ATTESTER_ENV = "AA_SAMPLE_ATTESTER_TEST"


class AttesterError(ValueError):
    """Raised when a TEE cannot be named or has no attester."""


class Attester(ABC):
    """Produces TEE evidence bound to the given report data."""

    @abstractmethod
    def get_evidence(self, report_data: str) -> str:
        """Return the evidence as a JSON string."""


class SampleAttester(Attester):
    """A dummy attester used to test and demonstrate KBC functionality."""

    def get_evidence(self, report_data: str) -> str:
        quote = {"svn": "1", "report_data": report_data}
        try:
            return json.dumps(quote, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise AttesterError("Serialize sample evidence failed") from exc


class Tee(Enum):
    """The supported TEE types."""

    TDX = "tdx"
    SGX_OCCLUM = "sgx"
    AZ_SNP_VTPM = "azsnpvtpm"
    SNP = "snp"
    SAMPLE = "sample"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> "Tee":
        """Look a TEE up by name, ignoring ASCII case."""
        wanted = name.lower()
        for member in cls:
            if member.value == wanted:
                return member
        raise AttesterError(f"unknown TEE type: {name!r}")

    def to_attester(self) -> Attester:
        """Return the attester that collects evidence on this TEE."""
        if self is Tee.SAMPLE:
            return SampleAttester()
        raise AttesterError("TEE is not supported!")


def detect_sample_platform() -> bool:
    """The platform counts as the sample TEE when the marker variable is set."""
    return SAMPLE_ATTESTER_ENV in os.environ


def detect_tee_type() -> Tee:
    """Detect which TEE platform the running environment is."""
    if detect_sample_platform():
        return Tee.SAMPLE
    return Tee.UNKNOWN