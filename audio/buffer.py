# audio/buffer.py
# ============================================================================
# Almacén de Bloques de Audio
# ============================================================================
# Cola FIFO de bloques tal como llegan del backend de captura. Cada bloque
# conserva su propia frecuencia de muestreo y un cursor de lectura. El
# renderizador pide "los próximos N segundos" y aquí se convierte ese
# intervalo en un corte exacto de muestras, cruzando bloques si hace falta.
# ============================================================================

import math
from collections import deque
from dataclasses import dataclass
from datetime import timedelta

import numpy as np

# Margen para dar por cumplido el intervalo pedido. Nunca comparamos contra
# cero exacto por el redondeo de coma flotante.
REMAINING_EPSILON = 0.001

DEFAULT_BUFFER_TARGET = 3


def as_seconds(duration):
    if isinstance(duration, timedelta):
        return duration.total_seconds()
    return float(duration)


@dataclass
class AudioChunk:
    """Un bloque de muestras recibido de la captura. Solo avanza el cursor."""
    samples: np.ndarray
    sample_rate: float
    cursor: int = 0

    @property
    def remaining(self) -> int:
        return len(self.samples) - self.cursor

    @property
    def exhausted(self) -> bool:
        return self.cursor >= len(self.samples)

    def read(self, duration: float):
        """
        Lee tantas muestras como quepan en `duration` segundos.
        Returns:
            tuple: (muestras leídas, segundos que representan)
        """
        desired = math.floor(duration * self.sample_rate)
        count = max(0, min(desired, self.remaining))
        values = self.samples[self.cursor:self.cursor + count]
        self.cursor += count
        return values, count / self.sample_rate


@dataclass
class TimedSlice:
    values: np.ndarray
    effective_rate: float

    def __len__(self):
        return len(self.values)


class ChunkStore:
    def __init__(self, target=DEFAULT_BUFFER_TARGET):
        self.target = target
        self.chunks = deque()
        self.dropped = 0

    def __len__(self):
        return len(self.chunks)

    @property
    def full(self):
        return len(self.chunks) >= self.target

    @property
    def queued_seconds(self):
        return sum(chunk.remaining / chunk.sample_rate for chunk in self.chunks)

    def ingest(self, samples, rate) -> bool:
        """
        Añade un bloque nuevo al final de la cola.
        Si la cola ya está llena el render va por detrás (o no dibuja): se
        descarta el bloque sin copiar nada.
        Returns:
            bool: True si el bloque se encoló.
        """
        if self.full:
            self.dropped += 1
            return False

        data = np.array(samples, dtype=np.float32).reshape(-1)
        if data.size == 0 or rate <= 0:
            return False
        self.chunks.append(AudioChunk(samples=data, sample_rate=float(rate)))
        return True

    def take(self, duration) -> TimedSlice:
        """
        Extrae las muestras equivalentes a `duration` (segundos o timedelta).

        La frecuencia efectiva del corte es la media de las frecuencias de
        cada bloque ponderada por el tiempo que aportó.
        """
        remaining = as_seconds(duration)
        if math.isnan(remaining) or remaining <= 0.0:
            remaining = 0.0
        elif math.isinf(remaining):
            # Un intervalo infinito vacía la cola; el margen cubre el redondeo
            remaining = self.queued_seconds + 1.0
        parts = []
        weighted_rate = 0.0
        elapsed_total = 0.0

        for index in range(len(self.chunks)):
            chunk = self.chunks[index]
            values, elapsed = chunk.read(remaining)

            parts.append(values)
            weighted_rate += chunk.sample_rate * elapsed
            elapsed_total += elapsed
            remaining -= elapsed

            if remaining < REMAINING_EPSILON:
                break
            # Lo que falta es menor que una muestra de este bloque; seguir con
            # el siguiente rompería el orden temporal.
            if not chunk.exhausted:
                break

        # Una sola eliminación de los bloques agotados del frente
        drained = 0
        while drained < len(self.chunks) and self.chunks[drained].exhausted:
            drained += 1
        for _ in range(drained):
            self.chunks.popleft()

        if elapsed_total <= 0.0:
            return TimedSlice(np.zeros(0, dtype=np.float32), 0.0)

        return TimedSlice(np.concatenate(parts), weighted_rate / elapsed_total)
