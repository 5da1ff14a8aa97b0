"""The single owner of round state for one app.

``GameRuntime`` wires the engine to its collaborators (balance store,
advisory service, Socket.IO broadcasts, the frame pump) and is kept in
``app.extensions['skyhigh']``. Route and socket handlers reach it through
``get_runtime()``; nothing else holds round state.
"""
import atexit
import random
import time
from typing import Callable, Optional

from flask import current_app

from skyhigh.services.advisory import AdvisoryService, create_advisor, run_inline
from skyhigh.services.rounds import Ledger, RoundEngine
from skyhigh.services.rounds.crash_point import generate_crash_point
from skyhigh.services.rounds.scheduler import FramePump
from skyhigh.store import SqlBalanceStore

EXTENSION_KEY = 'skyhigh'
NAMESPACE = '/ws'


def wall_clock_ms() -> float:
    return time.time() * 1000.0


class GameRuntime:
    def __init__(self, engine: RoundEngine, advisory: AdvisoryService,
                 clock: Callable[[], float] = wall_clock_ms):
        self.engine = engine
        self.advisory = advisory
        self.clock = clock
        self.pump: Optional[FramePump] = None

    def now_ms(self) -> float:
        return self.clock()

    def tick(self):
        return self.engine.tick(self.now_ms())

    def submit(self, command) -> bool:
        self.engine.submit(command)
        self.tick()
        return bool(command.accepted)

    def payload(self):
        return self.engine.to_dict()

    def shutdown(self) -> None:
        if self.pump:
            self.pump.stop()
        self.engine.shutdown()


def init_runtime(app, socketio) -> GameRuntime:
    """Build the runtime for ``app``. Loads the persisted balance once."""
    cfg = app.config
    store = SqlBalanceStore(app, key=cfg.get('BALANCE_KEY', 'skyhigh_balance'))
    ledger = Ledger(
        store,
        initial_balance=cfg.get('INITIAL_BALANCE', 1000),
        min_bet=cfg.get('MIN_BET', 10),
        max_bet=cfg.get('MAX_BET', 5000),
        default_bet=cfg.get('DEFAULT_BET', 100),
    )
    ledger.load()

    rng = random.SystemRandom()

    engine = RoundEngine(
        ledger,
        crash_point=lambda: generate_crash_point(rng),
        growth_rate=cfg.get('GROWTH_RATE', 0.05),
        pre_start_delay_ms=cfg.get('PRE_START_DELAY_MS', 3000),
        reset_delay_ms=cfg.get('CRASH_RESET_DELAY_MS', 4000),
        history_limit=cfg.get('HISTORY_LIMIT', 20),
    )

    advisor = create_advisor(
        cfg.get('ADVISOR_PROVIDER', 'fallback'),
        api_key=cfg.get('GEMINI_API_KEY', ''),
        model=cfg.get('GEMINI_MODEL', 'gemini-2.5-flash'),
    )
    spawn = run_inline if cfg.get('TESTING') else socketio.start_background_task
    advisory = AdvisoryService(advisor, spawn=spawn, window=cfg.get('ADVISOR_HISTORY_WINDOW', 10))

    runtime = GameRuntime(engine, advisory)

    def broadcast_state(state, view):
        socketio.emit('state_update', runtime.payload(), namespace=NAMESPACE)

    def broadcast_advice(insight):
        socketio.emit('advice_update', insight.to_dict(), namespace=NAMESPACE)

    engine.subscribe(broadcast_state)
    engine.subscribe(advisory.on_round_state)
    advisory.add_listener(broadcast_advice)

    runtime.pump = FramePump(app, runtime, socketio)
    app.extensions[EXTENSION_KEY] = runtime
    app.logger.info(
        f"[runtime-init] balance={ledger.balance:.2f} advisor={advisor.name} "
        f"growth={engine.growth_rate}"
    )
    return runtime


def get_runtime(app=None) -> GameRuntime:
    return (app or current_app).extensions[EXTENSION_KEY]


def install_shutdown_hook(app) -> GameRuntime:
    """Stop the pump and cancel pending round timers when the process exits."""
    runtime = get_runtime(app)
    atexit.register(runtime.shutdown)
    return runtime
