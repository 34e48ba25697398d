def _events(sio_client, name):
    return [pkt for pkt in sio_client.get_received('/ws') if pkt['name'] == name]


def test_socket_connect_receives_state(sio_client):
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')
    received = sio_client.get_received('/ws')
    names = [pkt['name'] for pkt in received]
    assert 'connected' in names
    assert 'room_state' in names


def test_watch_room_and_ping(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('watch_room', {}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'joined' for pkt in received)
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    pongs = _events(sio_client, 'pong')
    assert pongs and pongs[0]['args'][0] == {'n': 1}


def test_join_broadcasts_state(sio_client, client):
    sio_client.emit('watch_room', {}, namespace='/ws')
    sio_client.get_received('/ws')  # flush
    client.post('/api/room', json={'action': 'join', 'playerName': 'Alice'})
    updates = _events(sio_client, 'room_state')
    assert updates
    assert updates[-1]['args'][0]['playerCount'] == 1


def test_reset_broadcasts_state(sio_client, client, scheduler):
    sio_client.emit('watch_room', {}, namespace='/ws')
    for i in range(1, 11):
        client.post('/api/room', json={'action': 'join', 'playerName': f"P{i}"})
    sio_client.get_received('/ws')  # flush
    scheduler.fire()
    updates = _events(sio_client, 'room_state')
    assert updates
    assert updates[-1]['args'][0]['gamePhase'] == 'waiting'
    assert updates[-1]['args'][0]['gameNumber'] == 2


def test_unwatch_stops_updates(sio_client, client):
    sio_client.emit('watch_room', {}, namespace='/ws')
    sio_client.emit('unwatch_room', {}, namespace='/ws')
    sio_client.get_received('/ws')  # flush
    client.post('/api/room', json={'action': 'join', 'playerName': 'Alice'})
    assert _events(sio_client, 'room_state') == []
