import pytest

from kineticrir import Listener, Room, Scene, Speaker, Vector3


def _parts():
    room = Room.shoebox([3.0, 2.4, 5.5], attenuation=0.9)
    speaker = Speaker(position=[1.0, 2.0, 1.0])
    listener = Listener(position=[1.5, 1.8, 3.0], head_width=0.3, orientation=[0.0, 0.0, -1.0])
    return room, speaker, listener


def test_scene_speaker_axis_points_at_listener():
    room, speaker, listener = _parts()
    scene = Scene(room=room, speaker=speaker, listener=listener)
    axis = scene.speaker_axis()
    expected = Vector3(0.5, -0.2, 2.0).normalize()
    assert axis.sub(expected).length() < 1e-12


def test_scene_rejects_wrong_types():
    room, speaker, listener = _parts()
    with pytest.raises(TypeError, match="room"):
        Scene(room=object(), speaker=speaker, listener=listener)  # type: ignore[arg-type]
    with pytest.raises(TypeError, match="speaker"):
        Scene(room=room, speaker=None, listener=listener)  # type: ignore[arg-type]


def test_scene_rejects_coincident_speaker_and_listener():
    room, speaker, _ = _parts()
    listener = Listener(position=[1.0, 2.0, 1.0], head_width=0.3, orientation=[0.0, 0.0, -1.0])
    with pytest.raises(ValueError, match="coincide"):
        Scene(room=room, speaker=speaker, listener=listener)


def test_scene_rejects_listener_outside_room():
    room, speaker, _ = _parts()
    listener = Listener(position=[1.5, 1.8, 9.0], head_width=0.3, orientation=[0.0, 0.0, -1.0])
    with pytest.raises(ValueError, match="inside the room"):
        Scene(room=room, speaker=speaker, listener=listener)


def test_scene_replace_revalidates():
    room, speaker, listener = _parts()
    scene = Scene(room=room, speaker=speaker, listener=listener)
    moved = scene.replace(speaker=Speaker(position=[2.0, 1.0, 1.0]))
    assert moved.speaker.position == Vector3(2.0, 1.0, 1.0)
    with pytest.raises(ValueError):
        scene.replace(room=Room.shoebox([1.0, 1.0, 1.0], attenuation=0.9))


def test_scene_describe_mentions_every_part():
    room, speaker, listener = _parts()
    text = Scene(room=room, speaker=speaker, listener=listener).describe()
    assert "mean free path 2.15 m" in text
    assert "room" in text
    assert "directing" in text
    assert "left ear relative" in text
