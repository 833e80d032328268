"""Incremental decoder for the `oscap --progress` stdout protocol.

With --progress, oscap writes one record per evaluated rule:

    <rule id>:<result>\\n

Output arrives in chunks of arbitrary size, so the decoder keeps its state
between calls and walks the input one byte at a time. A delimiter seen in the
wrong state produces a protocol Diagnostic; the fragment collected so far is
dropped and decoding carries on in the same state.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Union

from .models import CapabilitySet, Diagnostic, DiagnosticKind, ProgressEvent

logger = logging.getLogger(__name__)

RULE_RESULT_SEPARATOR = ord(":")
RECORD_TERMINATOR = ord("\n")

DecoderOutput = Union[ProgressEvent, Diagnostic]


def decode_text(data: bytes) -> str:
    return bytes(data).decode("utf-8", errors="replace")


@dataclass
class DecoderState:
    """Parser state owned by exactly one running scan."""

    reading_rule_id: bool = True
    buffer: bytearray = field(default_factory=bytearray)
    last_rule_id: bytes = b""

    def reset(self) -> None:
        self.reading_rule_id = True
        self.buffer = bytearray()
        self.last_rule_id = b""

    @property
    def buffer_text(self) -> str:
        return decode_text(self.buffer)

    @property
    def is_pristine(self) -> bool:
        return self.reading_rule_id and not self.buffer and not self.last_rule_id


def decode_chunk(state: DecoderState, chunk: bytes) -> List[DecoderOutput]:
    """Advance `state` over `chunk`, returning events and diagnostics in order."""
    outputs: List[DecoderOutput] = []

    for byte in chunk:
        if byte == RULE_RESULT_SEPARATOR:
            if state.reading_rule_id:
                state.last_rule_id = bytes(state.buffer)
                state.reading_rule_id = False
            else:
                outputs.append(
                    Diagnostic(
                        kind=DiagnosticKind.PROTOCOL,
                        reason=(
                            "Error when parsing scan progress output from stdout of the "
                            "'oscap' process. ':' encountered while not reading rule ID, "
                            "newline and/or rule result are missing!"
                        ),
                        raw=decode_text(state.buffer),
                    )
                )
            state.buffer = bytearray()

        elif byte == RECORD_TERMINATOR:
            if not state.reading_rule_id:
                outputs.append(
                    ProgressEvent(
                        rule_id=decode_text(state.last_rule_id),
                        result=decode_text(state.buffer),
                    )
                )
                state.reading_rule_id = True
            else:
                outputs.append(
                    Diagnostic(
                        kind=DiagnosticKind.PROTOCOL,
                        reason=(
                            "Error when parsing scan progress output from stdout of the "
                            "'oscap' process. Newline encountered while reading rule ID, "
                            "rule result and/or ':' are missing!"
                        ),
                        raw=decode_text(state.buffer),
                    )
                )
            state.buffer = bytearray()

        else:
            state.buffer.append(byte)

    return outputs


class ProgressDecoder:
    """Feeds oscap stdout through decode_chunk for a single scan.

    When the installed oscap cannot report progress its stdout format is
    undefined, so the bytes are kept verbatim in raw_output instead.
    """

    def __init__(self, capabilities: CapabilitySet):
        self.capabilities = capabilities
        self.state = DecoderState()
        self._raw = bytearray()

    @property
    def enabled(self) -> bool:
        return self.capabilities.progress_reporting

    @property
    def raw_output(self) -> bytes:
        return bytes(self._raw)

    def feed(self, chunk: bytes) -> List[DecoderOutput]:
        if not self.enabled:
            self._raw.extend(chunk)
            return []
        outputs = decode_chunk(self.state, chunk)
        for output in outputs:
            if isinstance(output, Diagnostic):
                logger.debug(f"Progress protocol violation: {output.message}")
        return outputs

    def reset(self) -> None:
        self.state.reset()
        self._raw = bytearray()
