import json

import pytest

from cocoattest.attester import (
    AttesterError,
    SampleAttester,
    Tee,
    detect_sample_platform,
    detect_tee_type,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("tdx", Tee.TDX),
        ("TDX", Tee.TDX),
        ("sgx", Tee.SGX_OCCLUM),
        ("azsnpvtpm", Tee.AZ_SNP_VTPM),
        ("Snp", Tee.SNP),
        ("sample", Tee.SAMPLE),
        ("unknown", Tee.UNKNOWN),
    ],
)
def test_parse(name, expected):
    assert Tee.parse(name) is expected


def test_parse_rejects_unknown_name():
    with pytest.raises(AttesterError):
        Tee.parse("sgxocclum")


@pytest.mark.parametrize("tee", list(Tee))
def test_display_round_trips(tee):
    assert Tee.parse(str(tee)) is tee


def test_display_of_sgx():
    assert str(Tee.parse("SGX")) == "sgx"


def test_sample_to_attester():
    attester = Tee.SAMPLE.to_attester()
    assert isinstance(attester, SampleAttester)
    assert json.loads(attester.get_evidence("data"))["svn"] == "1"


@pytest.mark.parametrize("tee", [Tee.TDX, Tee.SGX_OCCLUM, Tee.AZ_SNP_VTPM, Tee.SNP, Tee.UNKNOWN])
def test_unsupported_to_attester(tee):
    with pytest.raises(AttesterError, match="TEE is not supported!"):
        tee.to_attester()


def test_sample_evidence():
    evidence = SampleAttester().get_evidence("abc")
    assert evidence == '{"svn":"1","report_data":"abc"}'


def test_sample_evidence_is_json_with_report_data():
    evidence = json.loads(Tee.SAMPLE.to_attester().get_evidence("report"))
    assert evidence == {"svn": "1", "report_data": "report"}


def test_detect_sample(monkeypatch):
    monkeypatch.setenv("AA_SAMPLE_ATTESTER_TEST", "1")
    assert detect_sample_platform() is True
    assert detect_tee_type() is Tee.SAMPLE


def test_detect_unknown(monkeypatch):
    monkeypatch.delenv("AA_SAMPLE_ATTESTER_TEST", raising=False)
    assert detect_sample_platform() is False
    assert detect_tee_type() is Tee.UNKNOWN