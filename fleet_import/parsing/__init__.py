"""Raw fleet export parsing: tokenizer, preamble skipper, file reader."""

from .preamble import HeaderLocation, is_data_row, is_instruction_row, locate_header
from .reader import ParsedCsv, SourceReadError, parse_csv, read_source_rows
from .tokenizer import tokenize_csv

__all__ = [
    "HeaderLocation",
    "ParsedCsv",
    "SourceReadError",
    "is_data_row",
    "is_instruction_row",
    "locate_header",
    "parse_csv",
    "read_source_rows",
    "tokenize_csv",
]
