from typing import Optional
import logging
import time

import psutil
from tqdm import tqdm


class ProgressMonitor:
    def __init__(self, total: int, desc: str = "Analyzing",
                 logger: Optional[logging.Logger] = None,
                 log_every: int = 100):
        """Progress bar over analysis windows with periodic log lines"""
        self.logger = logger or logging.getLogger('progress')
        self.pbar = tqdm(total=total, desc=desc, unit="window")
        self.total = total
        self.current = 0
        self.failed = 0
        self.log_every = log_every
        self.start_time = time.time()
        self.description = desc

    def update(self, n: int = 1, failed: bool = False):
        """Advance by n windows, counting failures separately"""
        self.current += n
        if failed:
            self.failed += n
        self.pbar.update(n)

        if self.current % self.log_every == 0:
            elapsed = time.time() - self.start_time
            progress = self.current / self.total if self.total else 1.0
            eta = (elapsed / progress) * (1 - progress) if progress > 0 else 0
            memory_mb = psutil.Process().memory_info().rss / 1024 / 1024

            self.logger.info(
                f"Progress: {self.current}/{self.total} "
                f"({progress*100:.1f}%) - "
                f"Failed: {self.failed} - "
                f"Elapsed: {elapsed:.1f}s - "
                f"ETA: {eta:.1f}s - "
                f"Memory: {memory_mb:.0f} MB"
            )

    def close(self):
        """Close progress bar and log final statistics"""
        self.pbar.close()
        total_time = time.time() - self.start_time
        self.logger.info(
            f"Completed {self.description}: {self.current - self.failed}/{self.total} "
            f"windows succeeded in {total_time:.1f} seconds"
        )
