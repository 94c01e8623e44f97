import logging

import pytest
import torch

from kineticrir import (
    Listener,
    RayTracingSimulator,
    Room,
    Scene,
    SimulationConfig,
    Speaker,
    SpeakerType,
    sample_unit_vectors,
    simulate_ray_traced,
)
from kineticrir.sim.raytrace import (
    TraceContext,
    choose_directions,
    classify_walls,
    deposit_binaural,
    intersect_room,
    trace_batch,
    trace_worker,
)
from kineticrir.util import allocate_buffer, max_bounce_count, sample_index


def _scene(kind=SpeakerType.DIRECTING, attenuation=0.9, speaker=(1.0, 2.0, 1.0)):
    return Scene(
        room=Room.shoebox([3.0, 2.4, 5.5], attenuation=attenuation),
        speaker=Speaker(position=list(speaker), kind=kind),
        listener=Listener(
            position=[1.5, 1.8, 3.0], head_width=0.3, orientation=[0.0, 0.0, -1.0]
        ),
    )


def _context(scene, *, sample_rate, duration, config=None):
    return TraceContext.from_scene(
        scene,
        sample_rate=sample_rate,
        duration=duration,
        nsample=int(round(sample_rate * duration)),
        config=config or SimulationConfig(),
        device=torch.device("cpu"),
        dtype=torch.float64,
    )


def _generator(seed):
    gen = torch.Generator()
    gen.manual_seed(seed)
    return gen


def _direct(scene, sample_rate):
    """(index, distance, orientation factor) of the direct sound per ear."""
    out = []
    for ear, offset in zip(scene.listener.ears(), scene.listener.ear_offsets()):
        path = ear.sub(scene.speaker.position)
        dot = path.normalize().dot(offset.normalize())
        factor = 1.0 - (dot + 1.0) / 2.0 * 0.9
        out.append((sample_index(path.length() / 330.0, sample_rate), path.length(), factor))
    return out


def test_intersect_room_axis_aligned():
    size = torch.tensor([3.0, 2.4, 5.5], dtype=torch.float64)
    pos = torch.tensor([[1.0, 1.0, 1.0], [1.0, 1.0, 1.0]], dtype=torch.float64)
    dirs = torch.tensor([[1.0, 0.0, 0.0], [0.0, -1.0, 0.0]], dtype=torch.float64)
    assert intersect_room(pos, dirs, size).tolist() == pytest.approx([2.0, 1.0])


def test_intersect_room_lands_on_a_wall():
    size = torch.tensor([3.0, 2.4, 5.5], dtype=torch.float64)
    gen = _generator(5)
    pos = (torch.rand(4000, 3, generator=gen, dtype=torch.float64) * 0.98 + 0.01) * size
    dirs = sample_unit_vectors(4000, generator=gen)
    dist = intersect_room(pos, dirs, size)
    assert torch.all(dist > 0)
    assert torch.all(dist <= torch.linalg.norm(size))
    hits = pos + dirs * dist[:, None]
    normals, on_wall = classify_walls(hits, size, 1e-9)
    assert torch.all(on_wall)
    assert torch.all(hits > -1e-9)
    assert torch.all(hits < size + 1e-9)
    assert torch.allclose(torch.linalg.norm(normals, dim=-1), torch.ones(4000, dtype=torch.float64))


def test_classify_walls_priority_and_misses():
    size = torch.tensor([3.0, 2.4, 5.5], dtype=torch.float64)
    points = torch.tensor(
        [[0.0, 0.0, 0.0], [3.0, 2.4, 1.0], [1.0, 1.0, 1.0], [1.0, 2.4, 5.5]],
        dtype=torch.float64,
    )
    normals, on_wall = classify_walls(points, size, 1e-6)
    assert on_wall.tolist() == [True, True, False, True]
    assert normals[0].tolist() == [1.0, 0.0, 0.0]
    assert normals[1].tolist() == [-1.0, 0.0, 0.0]
    assert normals[2].tolist() == [0.0, 0.0, 0.0]
    assert normals[3].tolist() == [0.0, -1.0, 0.0]


def test_choose_directions_respects_surface():
    normal = torch.tensor([[0.0, 0.0, 1.0]], dtype=torch.float64).repeat(2000, 1)
    dirs, gain = choose_directions(normal, kind=None, generator=_generator(1))
    cos = dirs[:, 2]
    assert torch.all(cos > 0)
    assert torch.all(gain == 1.0)

    dirs, gain = choose_directions(normal, kind=SpeakerType.DIRECTING, generator=_generator(2))
    assert torch.all(dirs[:, 2] > 0)
    assert torch.allclose(gain, dirs[:, 2])

    dirs, gain = choose_directions(
        normal, kind=SpeakerType.OMNI, generator=_generator(3), method="rejection"
    )
    assert bool((dirs[:, 2] < 0).any())
    assert torch.all(gain == 1.0)


def test_deposit_binaural_shadowing_and_spreading():
    buffer = allocate_buffer(100)
    ears = torch.tensor([[1.0, 0.0, 0.0], [0.0, 2.0, 0.0]], dtype=torch.float64)
    normals = torch.tensor([[1.0, 0.0, 0.0], [0.0, -1.0, 0.0]], dtype=torch.float64)
    origin = torch.zeros(1, 3, dtype=torch.float64)
    one = torch.ones(1, dtype=torch.float64)
    landed = deposit_binaural(
        buffer,
        origin,
        one,
        torch.zeros(1, dtype=torch.float64),
        ears=ears,
        ear_normals=normals,
        sample_rate=3300,
        speed_of_sound=330.0,
    )
    assert landed == 2
    # left ear is hit from behind (0.1), right ear head-on at distance 2
    assert buffer[10, 0].item() == pytest.approx(0.1)
    assert buffer[20, 1].item() == pytest.approx(0.25)
    assert buffer.sum().item() == pytest.approx(0.35)

    late = deposit_binaural(
        buffer,
        origin,
        one,
        torch.ones(1, dtype=torch.float64),
        ears=ears,
        ear_normals=normals,
        sample_rate=3300,
        speed_of_sound=330.0,
    )
    assert late == 0
    assert buffer.sum().item() == pytest.approx(0.35)


def test_bounce_count_is_bounded_by_attenuation():
    scene = _scene(kind=SpeakerType.DIFFUSE, attenuation=0.5)
    ctx = _context(scene, sample_rate=1000, duration=2.0)
    buffer = allocate_buffer(ctx.nsample)
    rays = 300
    stats = trace_batch(ctx, rays, buffer, generator=_generator(11))
    bound = max_bounce_count(0.5, 1e-6)
    assert stats.rays == rays
    assert stats.lost_rays < rays * 0.05
    assert (rays - stats.lost_rays) * bound <= stats.bounces <= rays * bound
    assert stats.deposits > 0


@pytest.mark.parametrize(
    "kind, scale",
    [(SpeakerType.DIFFUSE, 1.0), (SpeakerType.DIRECTING, 1.0), (SpeakerType.OMNI, 0.5)],
)
def test_direct_deposit_per_speaker_type(kind, scale):
    scene = _scene(kind=kind)
    ctx = _context(scene, sample_rate=44100, duration=0.025)
    rays = 200
    buffer, stats = trace_worker(ctx, rays, 3, batch_size=64)
    assert stats.rays == rays
    for channel, (idx, dist, factor) in enumerate(_direct(scene, 44100)):
        expected = rays * scale * factor / (dist * dist)
        assert buffer[idx, channel].item() == pytest.approx(expected, rel=1e-9)


def test_response_starts_at_nearest_ear_and_is_normalized():
    scene = _scene()
    cfg = SimulationConfig(num_rays=2000, seed=0)
    result = simulate_ray_traced(scene, sample_rate=44100, duration=0.025, config=cfg)
    assert result.buffer.shape == (1102, 2)
    assert result.method == "raytrace"
    assert result.seed == 0
    first = min(idx for idx, _, _ in _direct(scene, 44100))
    assert result.first_nonzero_index() == first
    assert torch.max(torch.abs(result.buffer)).item() == pytest.approx(1.0)
    assert result.interleaved().shape == (2204,)


def test_seeded_runs_are_reproducible():
    scene = _scene()
    cfg = SimulationConfig(num_rays=3001, seed=7, num_workers=3, ray_batch_size=500)
    first = simulate_ray_traced(scene, sample_rate=44100, duration=0.025, config=cfg)
    second = simulate_ray_traced(scene, sample_rate=44100, duration=0.025, config=cfg)
    assert torch.equal(first.buffer, second.buffer)
    assert first.stats == second.stats
    assert first.stats.rays == 3001

    other = simulate_ray_traced(
        scene, sample_rate=44100, duration=0.025, config=cfg.replace(seed=8)
    )
    assert not torch.equal(first.buffer, other.buffer)


def test_short_run_stays_silent(caplog):
    cfg = SimulationConfig(num_rays=50, seed=1)
    with caplog.at_level(logging.WARNING, logger="kineticrir"):
        result = simulate_ray_traced(_scene(), sample_rate=44100, duration=0.001, config=cfg)
    assert result.buffer.shape == (44, 2)
    assert torch.all(result.buffer == 0)
    assert "silent" in caplog.text


def test_deadline_stops_tracing_early():
    cfg = SimulationConfig(num_rays=50_000, ray_batch_size=100, seed=2, deadline=1e-9)
    result = simulate_ray_traced(_scene(), sample_rate=44100, duration=0.025, config=cfg)
    assert result.stats.rays < 50_000


def test_speaker_on_wall_is_rejected():
    scene = _scene(speaker=(0.0, 2.0, 1.0))
    with pytest.raises(ValueError, match="strictly inside"):
        simulate_ray_traced(scene, sample_rate=44100, duration=0.025, num_rays=10)


def test_ray_tracing_simulator_wrapper():
    sim = RayTracingSimulator(sample_rate=8000, duration=0.05, num_rays=500)
    result = sim.simulate(_scene(), SimulationConfig(seed=3))
    assert result.nsample == 400
    assert result.stats.rays == 500
    with pytest.raises(ValueError, match="sample_rate"):
        RayTracingSimulator(sample_rate=0, duration=0.05)


def test_energy_flips_sign_on_every_bounce(monkeypatch):
    import kineticrir.sim.raytrace.tracer as tracer_module

    passes = []
    deposit = tracer_module.deposit_binaural

    def recording(buffer, positions, energy, times, **kwargs):
        passes.append((positions.clone(), energy.clone(), times.clone()))
        return deposit(buffer, positions, energy, times, **kwargs)

    monkeypatch.setattr(tracer_module, "deposit_binaural", recording)

    scene = _scene(kind=SpeakerType.DIFFUSE, attenuation=0.5)
    sample_rate = 1_000_000
    ctx = _context(scene, sample_rate=sample_rate, duration=0.05)
    buffer = allocate_buffer(ctx.nsample)
    trace_batch(ctx, 1, buffer, generator=_generator(21))
    assert len(passes) >= 3

    energies = [energy.item() for _, energy, _ in passes]
    assert energies[0] == 1.0
    for k, value in enumerate(energies):
        assert value == pytest.approx((-0.5) ** k)

    # buffer values carry the sign; magnitudes shrink by the attenuation once
    # spreading and head shadowing are divided out
    ear = scene.listener.ears()[0].to_tensor(dtype=torch.float64)
    normal = scene.listener.ear_offsets()[0].normalize().to_tensor(dtype=torch.float64)
    levels = []
    for positions, _, times in passes[:2]:
        vec = ear - positions[0]
        dist = torch.linalg.norm(vec).item()
        factor = 1.0 - (torch.dot(vec / dist, normal).item() + 1.0) / 2.0 * 0.9
        idx = sample_index(times.item() + dist / 330.0, sample_rate)
        levels.append(buffer[idx, 0].item() * dist * dist / factor)
    assert levels[0] > 0
    assert levels[1] < 0
    assert levels[1] / levels[0] == pytest.approx(-0.5)
