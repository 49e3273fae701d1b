# core/config.py
# ============================================================================
# Configuración del Visualizador
# ============================================================================
# Parámetros inmutables que se fijan al arrancar el proceso (línea de
# comandos). El análisis espectral y el renderizador los reciben por
# inyección, nunca como variables globales.
# ============================================================================

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass(frozen=True)
class VisualizerConfig:
    # Mapeo de frecuencias
    power_scale_frequencies: float = 1.02
    ceiling_frequency: float = 15000.0
    floor_frequency: float = 0.0
    output_scale: float = 1.0

    # Cola de bloques de audio y ancho del espectro de salida
    buffer_target: int = 3
    spectrum_size: int = 512

    # Captura
    device: Optional[str] = None
    samplerate: int = 48000
    blocksize: int = 512

    # Ventana
    layout: Optional[Path] = None
    fps: int = 60
    width: int = 800
    height: int = 600

    log_level: str = "info"

    def validate(self):
        """
        Comprueba la coherencia de los parámetros.
        Raises:
            ValueError: si algún valor está fuera de rango.
        """
        if self.power_scale_frequencies <= 0:
            raise ValueError("power_scale_frequencies debe ser mayor que 0")
        if self.floor_frequency < 0:
            raise ValueError("floor_frequency no puede ser negativa")
        if self.ceiling_frequency <= self.floor_frequency:
            raise ValueError("ceiling_frequency debe ser mayor que floor_frequency")
        if self.output_scale < 0:
            raise ValueError("output_scale no puede ser negativo")
        if self.buffer_target < 1:
            raise ValueError("buffer_target debe ser al menos 1")
        if self.spectrum_size < 2:
            raise ValueError("spectrum_size debe ser al menos 2")
        if self.samplerate <= 0 or self.blocksize <= 0:
            raise ValueError("samplerate y blocksize deben ser positivos")
        if self.fps <= 0:
            raise ValueError("fps debe ser positivo")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level desconocido: {self.log_level}")
        return self


def build_parser():
    parser = argparse.ArgumentParser(
        prog="wmantle",
        description="Visualizador de espectro en tiempo real.",
    )
    parser.add_argument(
        "-p", "--power-scale-frequencies", type=float, default=1.02,
        help="Desplaza el espectro para mostrar más detalle en graves con valores "
             "mayores que 1 y en agudos con valores menores que 1",
    )
    parser.add_argument(
        "-c", "--ceiling-frequency", type=float, default=15000.0,
        help="Recorta el espectro para que esta frecuencia sea la más aguda (Hz)",
    )
    parser.add_argument(
        "-f", "--floor-frequency", type=float, default=0.0,
        help="Recorta el espectro para que esta frecuencia sea la más grave (Hz)",
    )
    parser.add_argument(
        "-s", "--scale", type=float, default=1.0,
        help="Multiplica los niveles de salida por este valor",
    )
    parser.add_argument(
        "layout", nargs="?", type=Path, default=None,
        help="Archivo OBJ con la geometría sobre la que se dibuja el espectro",
    )
    parser.add_argument("--buffer-target", type=int, default=3,
                        help="Bloques de audio máximos en cola")
    parser.add_argument("--size", type=int, default=512,
                        help="Número de bandas del espectro de salida")
    parser.add_argument("--device", default=None,
                        help="Parte del nombre del dispositivo de captura")
    parser.add_argument("--list-devices", action="store_true",
                        help="Lista los dispositivos de captura y sale")
    parser.add_argument("--samplerate", type=int, default=48000)
    parser.add_argument("--blocksize", type=int, default=512)
    parser.add_argument("--fps", type=int, default=60)
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="info")
    return parser


def config_from_args(args):
    """Convierte el Namespace de argparse en una configuración validada."""
    return VisualizerConfig(
        power_scale_frequencies=args.power_scale_frequencies,
        ceiling_frequency=args.ceiling_frequency,
        floor_frequency=args.floor_frequency,
        output_scale=args.scale,
        buffer_target=args.buffer_target,
        spectrum_size=args.size,
        device=args.device,
        samplerate=args.samplerate,
        blocksize=args.blocksize,
        layout=args.layout,
        fps=args.fps,
        log_level=args.log_level,
    ).validate()


def parse_args(argv=None):
    """
    Lee la línea de comandos.
    Returns:
        tuple: (VisualizerConfig, argparse.Namespace)
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.error(str(e))
    return config, args
