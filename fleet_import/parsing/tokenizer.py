from __future__ import annotations

"""CSV tokenizer for fleet exports.

Single pass over the text with an in-quotes flag:
- ``"`` toggles quoting; ``""`` inside quotes is a literal quote
- ``,`` outside quotes ends a field, CR / LF / CRLF outside quotes ends a row
- fields are trimmed, rows whose cells are all empty are dropped

Quoted fields may span lines. Malformed quoting is not an error; the
tokenizer just keeps going with whatever boundaries it has.
"""

__all__ = [
    "tokenize_csv",
]


def tokenize_csv(text: str) -> list[list[str]]:
    """Split CSV text into rows of trimmed string cells.

    Args:
        text: Raw CSV content

    Returns:
        Non-empty rows, in file order
    """
    rows: list[list[str]] = []
    current_row: list[str] = []
    field_chars: list[str] = []
    in_quotes = False

    def end_row() -> None:
        current_row.append("".join(field_chars).strip())
        if any(current_row):
            rows.append(list(current_row))
        current_row.clear()
        field_chars.clear()

    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        if char == '"':
            if in_quotes and i + 1 < length and text[i + 1] == '"':
                field_chars.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            current_row.append("".join(field_chars).strip())
            field_chars.clear()
        elif char in "\r\n" and not in_quotes:
            # CRLF -> handled on the LF
            if char == "\r" and i + 1 < length and text[i + 1] == "\n":
                i += 1
                continue
            if field_chars or current_row:
                end_row()
        else:
            field_chars.append(char)
        i += 1

    # last row without trailing newline
    if field_chars or current_row:
        end_row()

    return rows
