# cocoattest

Building blocks for confidential-container image encryption and attestation.

- `cocoattest.message`: the JSON messages exchanged with a key provider.
  These are `KeyProviderInput`, `KeyWrapParams`, `KeyUnwrapParams`, `Dc` and
  `Ec`, plus the `KeyWrapOutput` and `KeyUnwrapOutput` replies. Every problem is
  reported as a `MessageError`. `KeyProviderInput.from_bytes` decodes a request
  and validates it. Only the `keyunwrap` operation is accepted.
- `cocoattest.pairing`: `get_annotation`, `get_kbc_kbs_pair` and
  `str_to_kbc_kbs` read the base64 annotation and the `KBC_NAME::KBS_URI` pair
  from an unwrap request. They raise `PayloadError`, which is a subclass of
  `MessageError`.
- `cocoattest.payload`: `InputPayload` collects the KBC name, the KBS URI and
  the decoded annotation. You build it with `from_input` from a parsed request,
  or with `from_bytes` from raw JSON.
- `cocoattest.crypto`: `encrypt` with `Algorithm.A256GCM` or `Algorithm.A256CTR`.
  The key is 32 bytes. The GCM nonce is 12 bytes and the CTR IV is 16 bytes.
- `cocoattest.encryption`: `enc_optsdata_gen_anno` encrypts layer option data
  and returns a JSON `AnnotationPacket`. The module also has
  `parse_input_params`, `generate_key_parameters` and `normalize_path`.
- `cocoattest.attester`: `Tee`, `Attester`, `SampleAttester`,
  `detect_sample_platform` and `detect_tee_type`.

## Install

    pip install .

## Examples

Parse and check a key unwrap request:

```python
from cocoattest.payload import InputPayload

payload = InputPayload.from_bytes(request_bytes)
print(payload.kbc_name, payload.kbs_uri, payload.annotation)
```

The request's decryption config must carry, under the `attestation-agent`
parameter, the base64 of `KBC_NAME::KBS_URI`.

Wrap a layer key with the sample key provider:

```python
from cocoattest.encryption import enc_optsdata_gen_anno

annotation_json = enc_optsdata_gen_anno(b"layer key material", ["sample=true"])
```

Only the first element of the parameter list is read. It is a list of
`key=value` pairs separated by `::`. The recognised entries are these:

- `sample=true` uses the fixed sample key, a zero IV and the key id
  `kbs:///default/test-key/1`.
- `keyid=...` sets the key id. When it is missing, a random id under
  `/default/image-kek/` is made. The key id must have the form
  `[kbs://]<kbs-addr>/<repository>/<type>/<tag>`, and the address may be empty.
- `keypath=...` reads the key from that file, which must hold exactly 32
  bytes. Without it, a random key is generated.

The wrap type is looked up from the `keypath` value and otherwise falls back to
`A256GCM`, so in practice packets are made with AES-256-GCM. An `algorithm`
entry is not read.

Sample evidence, for tests and demos:

```python
from cocoattest.attester import Tee

evidence = Tee.parse("sample").to_attester().get_evidence("report-data")
# '{"svn":"1","report_data":"report-data"}'
```

`detect_tee_type()` returns `Tee.SAMPLE` when the `AA_SAMPLE_ATTESTER_TEST`
environment variable is set, and `Tee.UNKNOWN` otherwise.

## What it does not do

- There is no command and no key provider or resource server. Messages are
  only parsed, validated and serialised.
- Wrapped keys are not registered with a key broker service.
- Only the sample TEE has an attester. For `TDX`, `SGX_OCCLUM`,
  `AZ_SNP_VTPM`, `SNP` and `UNKNOWN`, `Tee.to_attester()` raises
  `AttesterError`.

## Tests

    pip install .[test]
    pytest