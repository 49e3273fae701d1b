# render/layout.py
# ============================================================================
# Geometría del Visualizador
# ============================================================================
# Define sobre qué superficie se dibuja el espectro. Cada vértice lleva
# (x, y, frecuencia, amplitud): la frecuencia elige la banda del espectro y
# la amplitud el umbral a partir del cual el píxel se apaga.
#
# Por defecto es un rectángulo a pantalla completa (graves a la izquierda,
# amplitud creciendo hacia arriba). Opcionalmente se carga un OBJ con trimesh.
# ============================================================================

import logging
import os

import numpy as np
import trimesh

log = logging.getLogger(__name__)

VERTEX_FLOATS = 4  # x, y, frequency, amplitude

DEFAULT_QUAD = np.array([
    # x,    y,   freq, amp
    [-1.0, -1.0, 0.0, 0.0],
    [ 1.0, -1.0, 1.0, 0.0],
    [ 1.0,  1.0, 1.0, 1.0],
    [-1.0, -1.0, 0.0, 0.0],
    [-1.0,  1.0, 0.0, 1.0],
    [ 1.0,  1.0, 1.0, 1.0],
], dtype=np.float32)


def _geometries(loaded):
    if isinstance(loaded, trimesh.Scene):
        return list(loaded.geometry.values())
    return [loaded]


def _unit_range(values):
    low, high = values.min(), values.max()
    if high - low <= 0:
        return np.zeros_like(values)
    return (values - low) / (high - low)


def load_layout(path):
    """
    Carga un OBJ y lo convierte en triángulos (x, y, frecuencia, amplitud).

    La geometría se centra y escala para caber en [-1, 1] conservando su
    proporción. Si la malla trae UVs se usan como (frecuencia, amplitud);
    si no, se derivan de la posición (x -> frecuencia, y -> amplitud).
    Raises:
        FileNotFoundError: si el archivo no existe.
        ValueError: si no contiene caras.
    """
    path = os.fspath(path)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Archivo de layout no encontrado: {path}")

    loaded = trimesh.load(path, process=False)

    positions = []
    coords = []
    has_uv = True
    for geometry in _geometries(loaded):
        faces = getattr(geometry, "faces", None)
        if faces is None or len(faces) == 0:
            continue
        verts = np.asarray(geometry.vertices, dtype=np.float64)[:, :2]
        uvs = getattr(geometry.visual, "uv", None)
        if uvs is None or len(uvs) != len(geometry.vertices):
            has_uv = False
            uvs = np.zeros((len(verts), 2))

        # Expandir índices: un vértice por esquina de triángulo
        flat = np.asarray(faces).reshape(-1)
        positions.append(verts[flat])
        coords.append(np.asarray(uvs, dtype=np.float64)[flat])

    if not positions:
        raise ValueError(f"El layout {path} no contiene caras")

    positions = np.concatenate(positions)
    coords = np.concatenate(coords)

    # Centrar y normalizar manteniendo la proporción
    low, high = positions.min(axis=0), positions.max(axis=0)
    center = (low + high) / 2
    half_extent = np.max(high - low) / 2
    if half_extent <= 0:
        raise ValueError(f"El layout {path} no tiene superficie")
    normalized = (positions - center) / half_extent

    if not has_uv:
        coords = np.column_stack([
            _unit_range(positions[:, 0]),
            _unit_range(positions[:, 1]),
        ])

    log.info("Layout %s cargado: %d triángulos", path, len(normalized) // 3)
    return np.column_stack([normalized, np.clip(coords, 0.0, 1.0)]).astype(np.float32)
