import os
import time
from contextlib import contextmanager

import pandas as pd
import psutil

from resolution_stability.utils.logging_utils import info


class PipelineTracker:
    """Wall time and memory use per pipeline stage."""

    def __init__(self, verbose=False):
        self.verbose = verbose
        self.records = []
        self.process = psutil.Process(os.getpid())
        self._stage = None

    def start(self, stage):
        self._stage = stage
        self._t0 = time.perf_counter()
        self._mem0 = self.process.memory_info().rss

    def stop(self):
        if self._stage is None:
            raise RuntimeError("PipelineTracker.stop() called before start()")
        t1 = time.perf_counter()
        mem1 = self.process.memory_info().rss

        record = {
            "stage": self._stage,
            "seconds": round(t1 - self._t0, 4),
            "memory_delta_mb": round((mem1 - self._mem0) / 1024**2, 3),
            "memory_current_mb": round(mem1 / 1024**2, 3),
        }
        self.records.append(record)
        self._stage = None

        if self.verbose:
            info(f"{record['stage']}: {record['seconds']}s | mem={record['memory_current_mb']}MB")
        return record

    @contextmanager
    def track(self, stage):
        self.start(stage)
        try:
            yield
        finally:
            self.stop()

    def summary(self):
        return pd.DataFrame(self.records, columns=["stage", "seconds", "memory_delta_mb", "memory_current_mb"])

    def save(self, path):
        self.summary().to_csv(path, sep="\t", index=False)
