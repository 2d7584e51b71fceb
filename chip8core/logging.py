"""Console logging utilities for the CHIP-8 core.

The core itself never prints. Drivers pass a :class:`TraceLogger` to
``step``/``run_n_instructions`` to get an instruction trace and fault reports.
"""

import time
import sys

from tqdm import tqdm

from chip8core.decode import decode, mnemonic


class ConsoleLogger:
    """Console logger with level filtering, colors and elapsed-time stamps."""

    def __init__(
        self,
        name: str = "chip8core",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.use_colors = (
            use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }
        if self.log_level not in self.level_order:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(self.level_order)}"
            )

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, flush=True)

    def debug(self, message: str):
        """Log debug message."""
        self.log("DEBUG", message)

    def warning(self, message: str):
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str):
        """Log error message."""
        self.log("ERROR", message)


class TraceLogger(ConsoleLogger):
    """Logger for emulator runs: instruction trace, key waits and faults."""

    def __init__(self, name: str = "CPU", trace: bool = False, **kwargs):
        super().__init__(name, **kwargs)
        self.trace = trace
        self.instruction_count = 0

    def log_instruction(self, pc: int, instruction: int):
        """Log one executed instruction at DEBUG level when tracing."""
        self.instruction_count += 1
        if self.trace:
            text = mnemonic(decode(instruction))
            self.debug(f"0x{pc:03X}: {instruction:04X}  {text}")

    def log_key_wait(self, register: int):
        """Log that FX0A parked the CPU waiting for a key."""
        self.debug(f"Waiting for key press into V{register:X}")

    def log_fault(self, error: Exception, state=None):
        """Log a fault with a register dump of the state it happened in."""
        self.error(f"{type(error).__name__}: {error}")
        if state is None:
            return
        registers = " ".join(f"V{i:X}={int(v):02X}" for i, v in enumerate(state.V))
        self.error(
            f"  pc=0x{int(state.pc):03X} I=0x{int(state.I):03X} "
            f"sp={int(state.stack.pointer)} DT={int(state.delay_timer)} "
            f"ST={int(state.sound_timer)}"
        )
        self.error(f"  {registers}")


def build_progress_bar(n: int, desc: str | None = None, **kwargs) -> tqdm:
    """Build a tqdm progress bar for a run of ``n`` instructions."""
    if desc is None:
        desc = f"Running ({n:,} instructions)"
    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)
    return tqdm(total=n, desc=desc, unit="instr", **kwargs)


def create_tracer(config) -> TraceLogger:
    """Build a :class:`TraceLogger` from a :class:`~chip8core.config.Chip8Config`."""
    return TraceLogger(
        trace=config.trace,
        log_level=config.log_level,
        use_colors=config.use_colors,
    )
