from dataclasses import dataclass

from .errors import InputError


@dataclass
class Settings:
    hash_width: int = 8
    hash_height: int = 8
    similarity_threshold: float = 0.9
    workers: int = 1

    def __post_init__(self) -> None:
        if self.hash_width < 1 or self.hash_height < 1:
            raise InputError(
                f"Hash grid must be at least 1x1, got {self.hash_width}x{self.hash_height}"
            )
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise InputError(
                f"Similarity threshold must lie in [0.0, 1.0], got {self.similarity_threshold}"
            )
        if self.workers < 1:
            raise InputError(f"Worker count must be positive, got {self.workers}")

    @property
    def bits(self) -> int:
        """Fingerprint width produced by this grid."""
        return self.hash_width * self.hash_height
