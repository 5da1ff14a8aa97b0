from flask_socketio import emit
from skyhigh import socketio
from skyhigh.runtime import NAMESPACE, get_runtime
from skyhigh.services.rounds import CashOut, PlaceBet, SetBet


def handle_connect(auth=None):
    runtime = get_runtime()
    runtime.tick()
    emit('connected', {'message': f'Connected to {NAMESPACE}', 'state': runtime.payload()})


def _run_command(name, command):
    runtime = get_runtime()
    accepted = runtime.submit(command)
    emit('command_result', {'command': name, 'accepted': accepted, 'state': runtime.payload()})


def handle_place_bet(data=None):
    _run_command('place_bet', PlaceBet())


def handle_cash_out(data=None):
    _run_command('cash_out', CashOut())


def handle_set_bet(data=None):
    amount = data.get('amount') if isinstance(data, dict) else data
    _run_command('set_bet', SetBet(amount=amount))


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    handlers = {
        'connect': handle_connect,
        'place_bet': handle_place_bet,
        'cash_out': handle_cash_out,
        'set_bet': handle_set_bet,
        'ping': handle_ping,
    }
    namespaces = [NAMESPACE, '/'] if testing else [NAMESPACE]
    for namespace in namespaces:
        for event, handler in handlers.items():
            socketio.on_event(event, handler, namespace=namespace)
