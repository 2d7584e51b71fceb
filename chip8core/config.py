"""Run configuration for CHIP-8 drivers.

Defaults live in :class:`Chip8Config`; :func:`load_config` layers a YAML file
and ``key=value`` overrides on top with OmegaConf, which also type-checks
every value against the dataclass schema.
"""

from dataclasses import dataclass

from omegaconf import OmegaConf


@dataclass
class Chip8Config:
    """Emulator run settings.

    Attributes:
        instruction_frequency: CHIP-8 CPU frequency in Hz (typically 700)
        timer_frequency: Delay/sound timer rate in Hz
        seed: Seed for the CXNN random generator
        log_level: Minimum level printed by the tracer
        trace: Log every executed instruction at DEBUG level
        use_colors: Color log levels when stdout is a terminal
    """
    instruction_frequency: int = 700
    timer_frequency: int = 60
    seed: int = 0
    log_level: str = "WARNING"
    trace: bool = False
    use_colors: bool = True

    @property
    def instructions_per_tick(self) -> int:
        """Number of instructions executed between two timer ticks."""
        return max(1, self.instruction_frequency // self.timer_frequency)


def load_config(path: str | None = None, overrides: list[str] | None = None) -> Chip8Config:
    """Build a configuration from defaults, an optional YAML file and overrides.

    Args:
        path: YAML file with any subset of the :class:`Chip8Config` fields
        overrides: Dotlist entries such as ``["seed=3", "trace=true"]``

    Returns:
        Validated :class:`Chip8Config`
    """
    cfg = OmegaConf.structured(Chip8Config)
    if path is not None:
        cfg = OmegaConf.merge(cfg, OmegaConf.load(path))
    if overrides:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(list(overrides)))

    config = OmegaConf.to_object(cfg)
    if config.instruction_frequency <= 0 or config.timer_frequency <= 0:
        raise ValueError("Frequencies must be positive")
    return config
