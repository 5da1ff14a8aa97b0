def _events(client, name):
    return [pkt for pkt in client.get_received('/ws') if pkt['name'] == name]


def test_socket_connect_sends_state(sio_client):
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')

    connected = _events(sio_client, 'connected')
    assert connected
    assert connected[0]['args'][0]['state']['status'] == 'idle'


def test_socket_place_bet_and_cash_out(sio_client, clock):
    sio_client.get_received('/ws')  # flush

    sio_client.emit('place_bet', namespace='/ws')
    received = sio_client.get_received('/ws')
    results = [pkt for pkt in received if pkt['name'] == 'command_result']
    assert results[0]['args'][0]['command'] == 'place_bet'
    assert results[0]['args'][0]['accepted'] is True
    updates = [pkt for pkt in received if pkt['name'] == 'state_update']
    assert updates and updates[-1]['args'][0]['status'] == 'starting'

    clock.advance(3000 + 8110)
    sio_client.emit('cash_out', namespace='/ws')
    result = _events(sio_client, 'command_result')[0]['args'][0]
    assert result['accepted'] is True
    assert result['state']['balance'] == 1050.0


def test_socket_set_bet_rejected_mid_round(sio_client):
    sio_client.emit('place_bet', namespace='/ws')
    sio_client.get_received('/ws')
    sio_client.emit('set_bet', {'amount': 'abc'}, namespace='/ws')
    result = _events(sio_client, 'command_result')[0]['args'][0]
    assert result['command'] == 'set_bet'
    assert result['accepted'] is False
    assert result['state']['current_bet'] == 100


def test_socket_ping(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    pongs = _events(sio_client, 'pong')
    assert pongs[0]['args'][0] == {'n': 1}
