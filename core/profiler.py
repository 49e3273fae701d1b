# core/profiler.py
# ============================================================================
# Sistema de Medición de Rendimiento
# ============================================================================
# Mide el tiempo de ejecución de bloques de código con un gestor de contexto.
# Guarda la última duración y una media suavizada por región.
# ============================================================================

import time

SMOOTHING = 0.9


class Profiler:
    def __init__(self):
        self.records = {}
        self.averages = {}

    def region(self, name):
        return ProfileRegion(self, name)

    def record(self, name, duration_ms):
        self.records[name] = duration_ms
        previous = self.averages.get(name)
        if previous is None:
            self.averages[name] = duration_ms
        else:
            self.averages[name] = previous * SMOOTHING + duration_ms * (1 - SMOOTHING)

    def get_results(self):
        return dict(self.records)

    def get_averages(self):
        return dict(self.averages)


class ProfileRegion:
    def __init__(self, profiler, name):
        self.profiler = profiler
        self.name = name

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, type, value, traceback):
        duration_ms = (time.perf_counter() - self.start_time) * 1000
        self.profiler.record(self.name, duration_ms)
