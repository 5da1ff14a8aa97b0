from flask import Blueprint, jsonify, request, current_app

from skyhigh.runtime import get_runtime
from skyhigh.services.rounds import CashOut, PlaceBet, SetBet


rounds = Blueprint('rounds', __name__)


def _command_response(command):
    runtime = get_runtime()
    accepted = runtime.submit(command)
    name = type(command).__name__
    if not accepted:
        current_app.logger.info(f"[ignored] command={name} status={runtime.engine.state.status.value}")
    return jsonify({'accepted': accepted, 'state': runtime.payload()})


@rounds.route('/state', methods=['GET'])
def get_state():
    runtime = get_runtime()
    runtime.tick()
    return jsonify(runtime.payload())


@rounds.route('/bet', methods=['POST'])
def place_bet():
    return _command_response(PlaceBet())


@rounds.route('/cashout', methods=['POST'])
def cash_out():
    return _command_response(CashOut())


@rounds.route('/bet-amount', methods=['PUT', 'POST'])
def set_bet_amount():
    data = request.get_json(silent=True) or {}
    amount = data.get('amount') if isinstance(data, dict) else None
    return _command_response(SetBet(amount=amount))


@rounds.route('/history', methods=['GET'])
def get_history():
    runtime = get_runtime()
    runtime.tick()
    return jsonify({'history': [h.to_dict() for h in runtime.engine.state.history]})


@rounds.route('/advice', methods=['GET'])
def get_advice():
    insight = get_runtime().advisory.latest
    return jsonify({'advice': insight.to_dict() if insight else None})


@rounds.route('/config', methods=['GET'])
def get_config():
    # Limits and timings so clients can render controls and countdowns
    cfg = current_app.config
    return jsonify({
        'min_bet': int(cfg.get('MIN_BET', 10)),
        'max_bet': int(cfg.get('MAX_BET', 5000)),
        'bet_presets': list(cfg.get('BET_PRESETS', [50, 100, 200, 500])),
        'growth_rate': float(cfg.get('GROWTH_RATE', 0.05)),
        'pre_start_delay_ms': int(cfg.get('PRE_START_DELAY_MS', 3000)),
        'crash_reset_delay_ms': int(cfg.get('CRASH_RESET_DELAY_MS', 4000)),
        'history_limit': int(cfg.get('HISTORY_LIMIT', 20)),
    })
