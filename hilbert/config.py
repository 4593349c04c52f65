import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from hilbert.result import Err, Ok, Result

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_MAX_PROOF_DEPTH = 256


@dataclass(frozen=True)
class Settings:
    """Runtime settings, read from the environment (and a ``.env`` file)."""

    log_level: str = DEFAULT_LOG_LEVEL
    max_proof_depth: int = DEFAULT_MAX_PROOF_DEPTH

    @classmethod
    def from_env(cls) -> Result["Settings", Exception]:
        """Reads HILBERT_LOG_LEVEL and HILBERT_MAX_PROOF_DEPTH."""
        load_dotenv()
        level = os.getenv("HILBERT_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        depth = os.getenv("HILBERT_MAX_PROOF_DEPTH", str(DEFAULT_MAX_PROOF_DEPTH)).strip()

        if level not in logging.getLevelNamesMapping():
            return Err(ValueError(f"HILBERT_LOG_LEVEL: unknown level '{level}'"))

        match depth:
            case str(d) if d.isdigit() and int(d) > 0:
                return Ok(cls(log_level=level, max_proof_depth=int(d)))
            case _:
                return Err(
                    ValueError(
                        f"HILBERT_MAX_PROOF_DEPTH must be a positive integer, got '{depth}'"
                    )
                )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
