from flask import Blueprint, jsonify

from skyhigh.runtime import get_runtime

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the SkyHigh crash simulator!'})

@main.route('/health')
def health():
    runtime = get_runtime()
    return jsonify({
        'status': 'healthy',
        'round_status': runtime.engine.state.status.value,
        'pump_running': bool(runtime.pump and runtime.pump.running),
    })
