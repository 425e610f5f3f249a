__all__ = ["Time"]


import time


class Time:
    @staticmethod
    def now() -> float:
        timestamp = time.time()
        return timestamp

    @staticmethod
    def now_ns() -> int:
        timestamp_ns = time.time_ns()
        return timestamp_ns
