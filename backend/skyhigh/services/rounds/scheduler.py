import logging
import threading
import time

logger = logging.getLogger(__name__)


class FramePump:
    """Background driver that ticks the round engine once per frame.

    - No-ops in TESTING mode unless ENABLE_SCHEDULER_IN_TESTS is set
    - At most one live worker: every start/stop bumps a generation and a
      worker exits as soon as its generation is stale
    - Exits when stopped or when the engine has been shut down
    """

    def __init__(self, app, runtime, socketio):
        self.app = app
        self.runtime = runtime
        self.socketio = socketio
        self._running = False
        self._generation = 0
        self._workers = 0
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._running

    @property
    def worker_count(self) -> int:
        return self._workers

    def start(self) -> bool:
        if self.app.config.get('TESTING') and not self.app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
            return False
        with self._lock:
            if self._running:
                self.app.logger.info("[pump-skip] already running")
                return False
            self._running = True
            self._generation += 1
            generation = self._generation
        interval_ms = int(self.app.config.get('FRAME_INTERVAL_MS', 16))
        self.app.logger.info(f"[pump-start] generation={generation} interval={interval_ms}ms")
        self.socketio.start_background_task(self._worker, interval_ms / 1000.0, generation)
        return True

    def stop(self) -> None:
        with self._lock:
            self._running = False
            self._generation += 1

    def _current(self, generation: int) -> bool:
        return self._generation == generation and not self.runtime.engine.closed

    def _worker(self, interval: float, generation: int) -> None:
        with self._lock:
            self._workers += 1
        try:
            hb = int(self.app.config.get('PUMP_HEARTBEAT_SEC', 0))
        except (TypeError, ValueError):
            hb = 0
        last_hb = time.time()
        frames = 0
        try:
            while self._current(generation):
                try:
                    self.runtime.tick()
                except Exception:
                    # A bad frame must not kill the round loop
                    logger.exception("[pump-frame-error]")
                frames += 1
                if hb > 0 and time.time() - last_hb >= hb:
                    state = self.runtime.engine.state
                    self.app.logger.info(
                        f"[pump-heartbeat] frames={frames} status={state.status.value} "
                        f"multiplier={state.current_multiplier:.2f}"
                    )
                    last_hb = time.time()
                    frames = 0
                self.socketio.sleep(interval)
        finally:
            with self._lock:
                self._workers -= 1
                if self._generation == generation:
                    self._running = False
            self.app.logger.info(f"[pump-stop] generation={generation}")
