"""
Data directives: .db, .dw and .end.

.db items are strings, labels or values; each value contributes its low
byte. .dw items are little-endian 16-bit words.
"""

from typing import Optional

from ti83_sdk.assembler.encoders.base import AssemblyContext, Encoder, word
from ti83_sdk.assembler.parser import split_data_items
from ti83_sdk.errors import (
    AssemblySyntaxError,
    InvalidLiteralError,
    InvalidOperandCountError,
)

_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "0": "\0", "\\": "\\", '"': '"'}


def decode_string(item: str) -> bytes:
    """
    Decode a double-quoted .db string into bytes.

    Recognises \\n, \\r, \\t, \\0, \\\\ and \\". Any other backslash is
    kept as written.
    """
    if len(item) < 2 or not item.endswith('"'):
        raise AssemblySyntaxError(f"unterminated string {item}")

    body = item[1:-1]
    chars = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            escaped = _ESCAPES.get(body[i + 1])
            if escaped is not None:
                chars.append(escaped)
                i += 2
                continue
        chars.append(ch)
        i += 1

    text = "".join(chars)
    try:
        return text.encode("latin-1")
    except UnicodeEncodeError:
        raise InvalidLiteralError(f"string {item} contains non 8-bit characters") from None


class DataDirectiveEncoder(Encoder):
    """Encodes .db, .dw and the .end marker."""

    def try_encode(
        self,
        mnemonic: str,
        operands: Optional[str],
        ctx: AssemblyContext,
    ) -> Optional[bytes]:
        if mnemonic == ".end":
            return b""
        if mnemonic not in (".db", ".dw"):
            return None

        items = split_data_items(operands)
        if not items:
            raise InvalidOperandCountError(mnemonic, "at least one value", 0)

        data = bytearray()
        for item in items:
            if not item:
                raise AssemblySyntaxError(f"empty item in '{mnemonic} {operands}'")
            if mnemonic == ".db":
                if item.startswith('"'):
                    data.extend(decode_string(item))
                else:
                    data.append(ctx.symbols.evaluate(item) & 0xFF)
            else:
                data.extend(word(ctx.symbols.evaluate(item)))
        return bytes(data)
