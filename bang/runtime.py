from __future__ import annotations

import ctypes
from typing import List, TextIO

# Symbol the native backend calls for every `print` statement.
PRINT_SYMBOL = "bang_print_i64"
PrintCallback = ctypes.CFUNCTYPE(None, ctypes.c_int64)


class RuntimeContext:
    def __init__(self, stdout: TextIO | None = None) -> None:
        self.stdout = stdout
        self.printed: List[int] = []

    def print_i64(self, value: int) -> None:
        self.printed.append(value)
        if self.stdout is not None:
            self.stdout.write(f"{value}\n")
            self.stdout.flush()

    def make_print_callback(self) -> ctypes._CFuncPtr:
        # Caller must keep the returned object alive while native code runs.
        return PrintCallback(self.print_i64)


def callback_address(callback: ctypes._CFuncPtr) -> int:
    return ctypes.cast(callback, ctypes.c_void_p).value
