from app.services.presence import COLOR_INSTRUMENTS, IdentityAllocator, RoomRegistry


def _registry(trail_length=50):
    return RoomRegistry(IdentityAllocator(), trail_length=trail_length)


def test_join_creates_room_with_fresh_presence():
    registry = _registry()
    room, presence = registry.join('dog', 'x')
    assert registry.has_room('dog')
    assert set(room) == {'x'}
    assert presence.position == 0
    assert list(presence.trail) == []
    assert presence.color in COLOR_INSTRUMENTS
    assert presence.instrument == COLOR_INSTRUMENTS[presence.color]


def test_last_leave_removes_room_and_color_pool():
    registry = _registry()
    registry.join('dog', 'x')
    registry.join('dog', 'y')
    assert registry.leave('dog', 'x') is not None
    assert registry.has_room('dog')
    assert registry.leave('dog', 'y') is not None
    assert not registry.has_room('dog')
    assert not registry.allocator.has_room('dog')
    assert registry.room_count() == 0


def test_leave_unknown_is_none():
    registry = _registry()
    assert registry.leave('dog', 'x') is None
    registry.join('dog', 'x')
    assert registry.leave('dog', 'nobody') is None


def test_simultaneous_presences_have_distinct_colors():
    registry = _registry()
    for i in range(len(COLOR_INSTRUMENTS)):
        registry.join('dog', f'c{i}')
    colors = [p.color for p in registry.presences('dog').values()]
    assert len(set(colors)) == len(colors)


def test_trail_keeps_last_fifty_positions():
    registry = _registry()
    registry.join('dog', 'x')
    for i in range(120):
        trail = registry.move('dog', 'x', i)
    assert trail == list(range(70, 120))
    presence = registry.get('dog', 'x')
    assert presence.position == 119
    assert len(presence.trail) == 50


def test_move_without_presence_is_ignored():
    registry = _registry()
    assert registry.move('dog', 'x', 3) is None
    registry.join('dog', 'y')
    assert registry.move('dog', 'x', 3) is None


def test_join_other_room_moves_presence():
    registry = _registry()
    registry.join('dog', 'x')
    registry.join('dog', 'y')
    registry.move('dog', 'x', 9)
    _, presence = registry.join('cat', 'x')
    assert 'x' not in registry.presences('dog')
    assert 'x' in registry.presences('cat')
    assert registry.room_of('x') == 'cat'
    assert presence.position == 0 and list(presence.trail) == []
    assert registry.user_count() == 2


def test_join_other_room_releases_old_color():
    allocator = IdentityAllocator(palette={'#111111': 'Synth', '#222222': 'FMSynth'})
    registry = RoomRegistry(allocator)
    _, x = registry.join('dog', 'x')
    registry.join('dog', 'y')
    registry.join('cat', 'x')
    assert x.color not in allocator.used_colors('dog')
