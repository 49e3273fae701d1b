# audio/engine.py
# ============================================================================
# Motor de Captura Híbrido (SoundDevice + SoundCard)
# ============================================================================
# Entrega los bloques de audio al gestor de buffers unificando dos backends:
# 1. SoundDevice (PortAudio): micrófonos físicos, por callback.
# 2. SoundCard (WASAPI/PulseAudio/CoreAudio): loopback de la salida del
#    sistema, leído desde un hilo propio.
#
# Ninguno de los dos espera por el análisis: fill_buffer() nunca bloquea.
# ============================================================================

import logging
import threading
import warnings

import sounddevice as sd
import soundcard as sc

from .pcm import as_float_samples

log = logging.getLogger(__name__)

# Las advertencias de SoundCard (descartes de buffer) ensucian la consola
warnings.filterwarnings("ignore", category=sc.SoundcardRuntimeWarning)


class AudioDeviceWrapper:
    """
    Interfaz común para dispositivos de sounddevice y soundcard.
    """
    def __init__(self, name, is_loopback, backend, ref, sd_index=None):
        self.name = name
        self.isloopback = is_loopback
        self.backend = backend  # 'sd' (SoundDevice) o 'sc' (SoundCard)
        self.ref = ref          # Objeto de SoundCard o dict de SoundDevice
        self.sd_index = sd_index

    def __repr__(self):
        return f"<AudioDeviceWrapper: {self.name} ({self.backend})>"


class SDCaptureStream:
    """
    Captura de micrófono por callback. El callback corre en el hilo de audio
    de PortAudio y pasa cada bloque directamente al gestor de buffers.
    """
    def __init__(self, device_index, samplerate, blocksize, sink):
        self.samplerate = samplerate
        self.sink = sink
        self.stream = sd.InputStream(
            device=device_index,
            channels=1,
            samplerate=samplerate,
            blocksize=blocksize,
            dtype="float32",
            callback=self._callback,
        )

    def _callback(self, indata, frames, time, status):
        self.sink.fill_buffer(as_float_samples(indata), self.samplerate)

    def start(self):
        self.stream.start()

    def stop(self):
        self.stream.stop()
        self.stream.close()


class SCLoopbackReader:
    """Lee bloques del loopback de SoundCard en un hilo dedicado."""

    def __init__(self, device, samplerate, blocksize, sink):
        self.device = device
        self.samplerate = samplerate
        self.blocksize = blocksize
        self.sink = sink
        self.running = False
        self.thread = None

    def start(self):
        self.running = True
        self.thread = threading.Thread(target=self._loop, daemon=True)
        self.thread.start()

    def _loop(self):
        try:
            with self.device.recorder(samplerate=self.samplerate, blocksize=self.blocksize) as rec:
                while self.running:
                    # record() bloquea el tiempo justo de un bloque
                    data = rec.record(numframes=self.blocksize)
                    self.sink.fill_buffer(as_float_samples(data), self.samplerate)
        except Exception as e:
            log.error("Captura de loopback interrumpida en %s: %s", self.device.name, e)
            self.running = False

    def stop(self):
        self.running = False
        if self.thread is not None:
            self.thread.join(timeout=1.0)


class AudioEngine:
    def __init__(self, ctx):
        self.ctx = ctx
        self.samplerate = ctx.config.samplerate
        self.blocksize = ctx.config.blocksize
        self.selected = None
        self.capture = None

    def get_devices(self):
        """
        Lista unificada de dispositivos: micrófonos vía SoundDevice y
        loopbacks vía SoundCard.
        """
        devices = []

        # --- 1. SoundDevice (Micrófonos) ---
        # En Windows preferimos WASAPI para reducir duplicados y latencia
        preferred_api_index = -1
        try:
            for i, api in enumerate(sd.query_hostapis()):
                if "WASAPI" in api["name"]:
                    preferred_api_index = i
                    break
        except sd.PortAudioError as e:
            log.warning("No se pudieron consultar las APIs de PortAudio: %s", e)

        try:
            for i, dev in enumerate(sd.query_devices()):
                if dev["max_input_channels"] <= 0:
                    continue
                if preferred_api_index != -1 and dev["hostapi"] != preferred_api_index:
                    continue
                devices.append(AudioDeviceWrapper(
                    name=f"[Mic] {dev['name']}",
                    is_loopback=False,
                    backend="sd",
                    ref=dev,
                    sd_index=i,
                ))
        except Exception as e:
            log.warning("Error inicializando SoundDevice: %s", e)

        # --- 2. SoundCard (Loopback / Parlantes) ---
        try:
            for dev in sc.all_microphones(include_loopback=True):
                if dev.isloopback:
                    devices.append(AudioDeviceWrapper(
                        name=f"[PC] {dev.name}",
                        is_loopback=True,
                        backend="sc",
                        ref=dev,
                    ))
        except Exception as e:
            log.warning("Error inicializando SoundCard: %s", e)

        return devices

    def select_device(self, query=None):
        """
        Elige el dispositivo de captura.
        Con `query` se busca por nombre; sin él se captura la salida del
        sistema (loopback del altavoz por defecto) y, si no existe, el
        micrófono por defecto.
        """
        devices = self.get_devices()
        if query:
            for dev in devices:
                if query.lower() in dev.name.lower():
                    self.selected = dev
                    return dev
            log.warning("Ningún dispositivo coincide con '%s'", query)

        try:
            speaker = sc.default_speaker()
            for dev in devices:
                if dev.backend == "sc" and speaker.name in dev.ref.name:
                    self.selected = dev
                    return dev
        except Exception as e:
            log.warning("No se pudo obtener el altavoz por defecto: %s", e)

        for dev in devices:
            if dev.backend == "sd":
                self.selected = dev
                return dev

        self.selected = devices[0] if devices else None
        return self.selected

    def start(self):
        """Abre la captura del dispositivo seleccionado."""
        if self.selected is None:
            self.select_device(self.ctx.config.device)
        if self.selected is None:
            log.warning("No hay dispositivos de captura disponibles")
            return False

        sink = self.ctx.buffers
        try:
            if self.selected.backend == "sd":
                self.capture = SDCaptureStream(
                    self.selected.sd_index, self.samplerate, self.blocksize, sink,
                )
            else:
                self.capture = SCLoopbackReader(
                    self.selected.ref, self.samplerate, self.blocksize, sink,
                )
            self.capture.start()
        except Exception as e:
            log.warning("Error al abrir dispositivo %s: %s", self.selected.name, e)
            self.capture = None
            return False

        log.info("Capturando de %s a %d Hz", self.selected.name, self.samplerate)
        return True

    def stop(self):
        if self.capture is None:
            return
        try:
            self.capture.stop()
        except Exception as e:
            log.warning("Error cerrando la captura: %s", e)
        self.capture = None
