from dataclasses import dataclass

BACKENDS = ("python", "torch")
EXHAUSTION_POLICIES = ("stop", "error")

# 256 literals plus at least one merge must be addressable
MIN_ID_BITS = 9
# Largest id must still fit a signed 64-bit integer
MAX_ID_BITS = 63


@dataclass
class TrainingConfig:
    num_merges: int
    id_bits: int = 32
    backend: str = "python"
    on_exhausted: str = "stop"
    log_every: int = 1

    def validate(self) -> None:
        if self.num_merges < 0:
            raise ValueError(f"num_merges must be non-negative, got {self.num_merges}!")
        if self.id_bits < MIN_ID_BITS:
            raise ValueError(f"id_bits must be at least {MIN_ID_BITS}, got {self.id_bits}!")
        if self.id_bits > MAX_ID_BITS:
            raise ValueError(f"id_bits must be at most {MAX_ID_BITS}, got {self.id_bits}!")
        if self.backend not in BACKENDS:
            raise ValueError(f"Backend {self.backend} is not recognized!")
        if self.on_exhausted not in EXHAUSTION_POLICIES:
            raise ValueError(f"Exhaustion policy {self.on_exhausted} is not recognized!")
        if self.log_every < 0:
            raise ValueError(f"log_every must be non-negative, got {self.log_every}!")
