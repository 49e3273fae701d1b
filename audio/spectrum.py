# audio/spectrum.py
# ============================================================================
# Remapeo del Espectro
# ============================================================================
# Lleva la salida lineal de la FFT a un número fijo de bandas visuales.
# El eje de frecuencias es no lineal (potencias de una base configurable,
# más resolución en graves) y la magnitud se comprime con un logaritmo.
# ============================================================================

import math

import numpy as np


def index_bounds(size, rate, floor_frequency, ceiling_frequency):
    """
    Índices [lo, hi) de la FFT que caen dentro del rango de frecuencias.

    Por la simetría hermítica de una entrada real solo la primera mitad
    (hasta Nyquist incluido) tiene información.
    """
    if rate <= 0:
        return 0, 0
    hi = min(size // 2 + 1, math.floor(size * ceiling_frequency / rate))
    lo = math.ceil(size * floor_frequency / rate)
    return lo, hi


def build_knots(count, power_base):
    """
    Posiciones no lineales de `count` índices consecutivos.
    knot(0) = 0, knot(i) = 1 - 1/B**i, reescalado a [0, count - 1].
    Con B > 1 los graves ocupan más bandas; con B < 1, los agudos.
    """
    indices = np.arange(count, dtype=np.float64)
    last = count - 1
    a = math.log(power_base)
    if count < 2 or abs(a) < 1e-12:
        return indices

    # expm1 evita desbordes y cancelaciones para bases cercanas a 1 o < 1
    if a > 0:
        knots = np.expm1(-a * indices) / np.expm1(-a * last)
    else:
        b = -a
        knots = np.exp(b * (indices - last)) * np.expm1(-b * indices) / np.expm1(-b * last)
    return knots * last


class SpectrumRemapper:
    def __init__(self, config, target_count):
        self.config = config
        self.target_count = target_count

        # Caché de nudos: se recalcula solo si cambia el número de índices
        self._knot_count = 0
        self._knots = None
        self._positions = None

    def _knots_for(self, count):
        if count != self._knot_count:
            self._knots = build_knots(count, self.config.power_scale_frequencies)
            self._positions = np.linspace(self._knots[0], self._knots[-1], self.target_count)
            self._knot_count = count
        return self._knots, self._positions

    def remap(self, spectrum, rate, scale):
        """
        Args:
            spectrum (np.ndarray): salida compleja de la FFT.
            rate (float): frecuencia de muestreo efectiva del corte.
            scale (float): factor de normalización (sqrt del tamaño).
        Returns:
            np.ndarray | None: `target_count` valores float32, o None si tras
            recortar graves/agudos quedan menos de 2 índices.
        """
        lo, hi = index_bounds(
            len(spectrum), rate,
            self.config.floor_frequency, self.config.ceiling_frequency,
        )
        count = hi - lo
        if count < 2:
            return None

        knots, positions = self._knots_for(count)
        segment = spectrum[lo:hi]

        # Interpolación lineal por tramos sobre los nudos
        real = np.interp(positions, knots, segment.real)
        imag = np.interp(positions, knots, segment.imag)

        magnitude = np.hypot(real, imag) / scale
        levels = np.log10(1.0 + magnitude) * self.config.output_scale
        return levels.astype(np.float32)
