"""Request signing: key material, instruction lookup and signee construction."""

from bpxclient.signing.instructions import INSTRUCTIONS, resolve_instruction
from bpxclient.signing.keys import KeyPair
from bpxclient.signing.signee import (
    append_timestamp_window,
    build_request_signee,
    build_signee_query,
    build_signee_query_and_body,
    build_subscribe_signee,
    now_millis,
)

__all__ = [
    "INSTRUCTIONS",
    "KeyPair",
    "append_timestamp_window",
    "build_request_signee",
    "build_signee_query",
    "build_signee_query_and_body",
    "build_subscribe_signee",
    "now_millis",
    "resolve_instruction",
]
