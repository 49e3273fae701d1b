# audio/pcm.py
# ============================================================================
# Conversión de PCM en la Frontera de Captura
# ============================================================================
# Los backends entregan bytes crudos o arrays (frames, canales). El análisis
# solo acepta secuencias float32 mono ya validadas.
# ============================================================================

import numpy as np

FLOAT32_BYTES = 4


def as_float_samples(raw, channels=1):
    """
    Convierte un bloque de captura en muestras float32 mono.
    Args:
        raw: bytes con float32 intercalados, o array numpy (frames,) /
            (frames, canales).
        channels (int): canales intercalados cuando `raw` son bytes.
    Returns:
        np.ndarray: muestras float32 de una dimensión.
    Raises:
        ValueError: si la longitud no cuadra con el formato declarado.
    """
    if channels < 1:
        raise ValueError(f"Número de canales inválido: {channels}")

    if isinstance(raw, (bytes, bytearray, memoryview)):
        nbytes = len(raw) if not isinstance(raw, memoryview) else raw.nbytes
        if nbytes % FLOAT32_BYTES:
            raise ValueError(f"{nbytes} bytes no es múltiplo de {FLOAT32_BYTES} (float32)")
        data = np.frombuffer(raw, dtype=np.float32)
        if data.size % channels:
            raise ValueError(f"{data.size} muestras no se reparten en {channels} canales")
        data = data.reshape(-1, channels)
    else:
        data = np.asarray(raw, dtype=np.float32)
        if data.ndim > 2:
            raise ValueError(f"Forma de bloque no soportada: {data.shape}")

    if data.ndim == 2:
        # Mezcla a mono promediando canales
        if data.shape[1] == 1:
            data = data[:, 0]
        else:
            data = data.mean(axis=1)

    return np.ascontiguousarray(data, dtype=np.float32)
