from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Row progress bar for interactive runs.

The bar is drawn only when stdout is a TTY; under CI or redirected output the
tqdm instance is created disabled and ignores every call, so log files stay
free of control sequences.
"""

__all__ = [
    "RowProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class RowProgressTracker:
    """``on_progress(current, total)`` adapter over a single tqdm bar.

    The importer reports absolute positions (1..total); tqdm counts
    increments, so the tracker keeps the last position it saw.

    Usage::

        with RowProgressTracker(len(rows)) as tracker:
            bulk_import_trucks(text, company_id, store, on_progress=tracker)
    """

    def __init__(self, total_rows: int, *, description: str = "Importing trucks") -> None:
        self.total_rows = total_rows
        self.current_row = 0
        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] = tqdm(
            total=total_rows,
            desc=description,
            unit="row",
            disable=not self.enabled,
            leave=True,
            ncols=80,
            ascii=True,
        )

    def __call__(self, current: int, total: int) -> None:
        if total != self.total_rows:
            self.total_rows = total
            self.pbar.total = total
            self.pbar.refresh()
        step = current - self.current_row
        self.current_row = current
        if step > 0:
            self.pbar.update(step)

    def set_postfix(self, **counters: Any) -> None:
        self.pbar.set_postfix(**counters)

    def close(self) -> None:
        self.pbar.close()

    def __enter__(self) -> RowProgressTracker:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
