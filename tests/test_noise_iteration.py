import numpy as np
import pytest

from terrain_streamer.core.noise_iteration import DepthCurve, IterationSet, NoiseIteration
from terrain_streamer.host.config.value_default import ConfigurationError


class TestDepthCurve:

    def test_linear_is_identity_inside_range(self):
        curve = DepthCurve.linear()
        for t in (0.0, 0.25, 0.5, 0.9, 1.0):
            assert curve(t) == pytest.approx(t)

    def test_clamps_outside_key_range(self):
        curve = DepthCurve.linear()
        assert curve(-3.0) == pytest.approx(0.0)
        assert curve(2.5) == pytest.approx(1.0)

    def test_array_input_keeps_shape(self):
        curve = DepthCurve.linear()
        values = curve(np.array([[0.0, 0.5], [1.0, 2.0]]))
        assert values.shape == (2, 2)
        np.testing.assert_allclose(values, [[0.0, 0.5], [1.0, 1.0]])

    def test_passes_through_keys(self):
        curve = DepthCurve(((0.0, 0.0), (0.5, 0.2), (1.0, 1.0)))
        assert curve(0.5) == pytest.approx(0.2)
        assert curve(1.0) == pytest.approx(1.0)

    def test_default_tangents_keep_monotone_keys_monotone(self):
        curve = DepthCurve(((0.0, 0.0), (0.6, 0.1), (1.0, 1.0)))
        values = curve(np.linspace(0.0, 1.0, 101))
        assert np.all(np.diff(values) >= -1e-12)

    def test_keys_are_sorted(self):
        curve = DepthCurve(((1.0, 1.0), (0.0, 0.0)))
        assert curve(0.0) == pytest.approx(0.0)

    def test_constant_curve(self):
        curve = DepthCurve.constant(0.4)
        assert curve(0.0) == 0.4
        np.testing.assert_allclose(curve(np.zeros(3)), [0.4, 0.4, 0.4])

    def test_invalid_keys(self):
        with pytest.raises(ConfigurationError):
            DepthCurve(())
        with pytest.raises(ConfigurationError):
            DepthCurve(((0.5, 0.0), (0.5, 1.0)))
        with pytest.raises(ConfigurationError):
            DepthCurve(((0.0, 0.0), (1.0, 1.0)), tangents=(1.0,))


class TestNoiseIteration:

    def test_defaults(self):
        iteration = NoiseIteration()
        assert iteration.enabled
        assert iteration.depth == 20
        assert iteration.rarity == 1.0
        assert iteration.depth_curve(0.5) == pytest.approx(0.5)

    @pytest.mark.parametrize("changes", [{"scale": 0.0}, {"rarity": 0.0}, {"depth": -1}])
    def test_validate_rejects_invalid_values(self, changes):
        with pytest.raises(ConfigurationError):
            NoiseIteration(**changes).validate()


class TestIterationSet:

    def test_total_depth_tracks_changes(self):
        iterations = IterationSet([NoiseIteration(name="a", depth=10), NoiseIteration(name="b", depth=30)])
        assert iterations.total_depth == 40

        iterations.add(NoiseIteration(name="c", depth=5))
        assert iterations.total_depth == 45

        iterations.set_enabled(1, False)
        assert iterations.total_depth == 15
        assert [it.name for it in iterations.enabled()] == ["a", "c"]

        iterations.update(0, depth=25)
        assert iterations.total_depth == 30
        assert iterations[0].depth == 25

        removed = iterations.remove(2)
        assert removed.name == "c"
        assert iterations.total_depth == 25
        assert len(iterations) == 2

    def test_update_validates(self):
        iterations = IterationSet([NoiseIteration(name="a")])
        with pytest.raises(ConfigurationError):
            iterations.update(0, scale=0.0)
        assert iterations[0].scale != 0.0

    def test_add_validates(self):
        iterations = IterationSet()
        with pytest.raises(ConfigurationError):
            iterations.add(NoiseIteration(rarity=0.0))
        assert len(iterations) == 0
        assert iterations.total_depth == 0

    def test_iteration_order_is_list_order(self):
        names = ["first", "second", "third"]
        iterations = IterationSet([NoiseIteration(name=name) for name in names])
        assert [it.name for it in iterations] == names
