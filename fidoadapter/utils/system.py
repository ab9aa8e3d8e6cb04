import os

import psutil


def log_memory_usage(logger, step: str):
    """Log memory usage for a given step."""
    process = psutil.Process(os.getpid())
    mem_info = process.memory_info()
    logger.debug(
        f"Memory usage after {step}: RSS={mem_info.rss / 1024 / 1024:.1f}MB, VMS={mem_info.vms / 1024 / 1024:.1f}MB"
    )
