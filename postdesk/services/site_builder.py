import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class SiteBuilder:
    """Runs the static site generator. Failures are logged, never raised."""

    def __init__(
        self,
        command: str,
        cwd: Path | str = ".",
        enabled: bool = True,
        timeout: int = 300,
    ):
        self.command = command
        self.cwd = Path(cwd)
        self.enabled = enabled
        self.timeout = timeout

    def regenerate(self) -> bool:
        if not self.enabled:
            logger.debug("Site regeneration disabled, skipping")
            return False

        logger.info(f"Regenerating site: {self.command}")
        try:
            result = subprocess.run(
                self.command,
                shell=True,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.error(f"Site regeneration timed out after {self.timeout}s")
            return False
        except OSError as e:
            logger.error(f"Site regeneration could not start: {e}")
            return False

        if result.returncode != 0:
            logger.error(
                f"Site regeneration failed ({result.returncode}): "
                f"{result.stderr.strip() or result.stdout.strip()}"
            )
            return False

        logger.info("Site regenerated")
        return True
