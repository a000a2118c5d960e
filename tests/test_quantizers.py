"""Tests for the quantizer registry, k-means and median cut."""

import numpy as np
import pytest
from color_buddy import registry
from color_buddy.core.config import PaletteConfig
from color_buddy.core.errors import InvalidColorCount, QuantizationFailure
from color_buddy.core.palette import Color
from color_buddy.core.types import Quantizer
from color_buddy.quantizers import kmeans, median_cut

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
METHODS = ['k-means', 'median-cut']


def _pattern_image(width: int, height: int, colours: list[tuple[int, int, int]]) -> np.ndarray:
    """Diagonal stripes: pixel (x, y) gets colours[(x + y) % len(colours)]."""
    ys, xs = np.mgrid[0:height, 0:width]
    return np.array(colours, dtype=np.uint8)[(xs + ys) % len(colours)]


def _solid_image(width: int, height: int, colour: tuple[int, int, int]) -> np.ndarray:
    return np.full((height, width, 3), colour, dtype=np.uint8)


def _random_image(width: int, height: int, seed: int = 7) -> np.ndarray:
    return np.random.default_rng(seed).integers(0, 256, size=(height, width, 3), dtype=np.uint8)


def _banded_image() -> np.ndarray:
    """25 pixels each of four greys: two dark, two light."""
    rows = [(0, 0, 0), (10, 10, 10), (200, 200, 200), (210, 210, 210)]
    return np.repeat(np.array(rows, dtype=np.uint8), 25, axis=0)


class TestRegistry:
    def test_discovers_both_methods(self):
        assert sorted(registry.all_quantizers()) == METHODS

    def test_get_returns_quantizer(self):
        q = registry.get('median-cut')
        assert isinstance(q, Quantizer)
        assert q.name == 'median-cut'

    def test_unknown_method(self):
        with pytest.raises(KeyError, match='Available: k-means, median-cut'):
            registry.get('octree')

    def test_quantizer_without_run_fn(self):
        with pytest.raises(RuntimeError):
            Quantizer(name='empty').quantize(np.zeros((1, 3), dtype=np.uint8), 1, PaletteConfig())


class TestExtractPalette:
    @pytest.mark.parametrize('n', [0, -1, 257, 1000])
    def test_rejects_bad_count(self, n):
        with pytest.raises(InvalidColorCount):
            registry.extract_palette(_solid_image(2, 2, RED), n, 'k-means')

    def test_invalid_count_is_value_error(self):
        with pytest.raises(ValueError, match='must be 1-256'):
            registry.extract_palette(_solid_image(2, 2, RED), 0, 'median-cut')

    def test_empty_image(self):
        with pytest.raises(QuantizationFailure):
            registry.extract_palette(np.zeros((0, 0, 3), dtype=np.uint8), 1, 'k-means')

    @pytest.mark.parametrize('method', METHODS)
    def test_solid_grey(self, method):
        palette = registry.extract_palette(_solid_image(10, 10, (128, 128, 128)), 1, method)
        assert palette == [Color(128, 128, 128, 255)]
        assert palette[0].hex == '#808080'

    @pytest.mark.parametrize('method', METHODS)
    def test_single_pixel(self, method):
        palette = registry.extract_palette(_solid_image(1, 1, (42, 142, 242)), 1, method)
        assert palette == [Color(42, 142, 242)]

    @pytest.mark.parametrize('method', METHODS)
    def test_deterministic(self, method):
        image = _random_image(40, 30)
        first = registry.extract_palette(image, 8, method)
        second = registry.extract_palette(image.copy(), 8, method)
        assert first == second

    @pytest.mark.parametrize('method', METHODS)
    def test_all_alpha_opaque(self, method):
        palette = registry.extract_palette(_random_image(20, 20), 8, method)
        assert all(c.a == 255 for c in palette)

    def test_accepts_flat_pixel_list(self):
        pixels = np.array([RED, RED, BLUE], dtype=np.uint8)
        assert len(registry.extract_palette(pixels, 2, 'median-cut')) == 2


class TestKMeans:
    def test_three_stripes(self):
        image = _pattern_image(10, 10, [RED, GREEN, BLUE])
        palette = registry.extract_palette(image, 3, 'k-means')
        # histogram order is sorted by r, g, b
        assert palette == [Color(*BLUE), Color(*GREEN), Color(*RED)]

    def test_two_clusters_average(self):
        palette = registry.extract_palette(_banded_image(), 2, 'k-means')
        assert palette == [Color(5, 5, 5), Color(205, 205, 205)]

    @pytest.mark.parametrize('n', [1, 2, 8, 64, 256])
    def test_always_exactly_n(self, n):
        image = _pattern_image(5, 5, [RED, GREEN, BLUE])
        assert len(registry.extract_palette(image, n, 'k-means')) == n

    def test_pads_with_duplicates(self):
        palette = registry.extract_palette(_solid_image(3, 3, RED), 4, 'k-means')
        assert palette == [Color(*RED)] * 4

    def test_iteration_ceiling_still_returns_n(self):
        config = PaletteConfig(max_iterations=1)
        palette = registry.extract_palette(_random_image(16, 16), 6, 'k-means', config)
        assert len(palette) == 6

    def test_seed_indices_sample_by_frequency(self):
        counts = np.array([30, 40, 30])
        assert kmeans.seed_indices(counts, 1).tolist() == [1]
        assert kmeans.seed_indices(counts, 4).tolist() == [0, 1, 2, 2]

    def test_repeated_seeds_move_to_next_unused_entry(self):
        counts = np.array([5, 5, 90])
        assert kmeans.seed_indices(counts, 3).tolist() == [2, 0, 1]

    def test_skewed_population_still_reaches_n(self):
        pixels = np.array([RED] * 90 + [GREEN] * 5 + [BLUE] * 5, dtype=np.uint8)
        palette = registry.extract_palette(pixels, 3, 'k-means')
        assert palette == [Color(*RED), Color(*BLUE), Color(*GREEN)]

    def test_dominant_colour_not_repeated(self):
        pixels = np.array([RED] * 900 + [GREEN] * 10 + [BLUE] * 10 + [(0, 0, 0)] * 10, dtype=np.uint8)
        palette = registry.extract_palette(pixels, 4, 'k-means')
        assert len(set(palette)) == 4

    def test_empty_cluster_moves_to_farthest_entry(self):
        points = np.array([(0, 0, 0), (10, 0, 0), (100, 0, 0)], dtype=np.float64)
        centroids = np.array([(5, 0, 0), (100, 0, 0), (7, 7, 7)], dtype=np.float64)
        labels = np.array([0, 0, 1])
        occupied = np.array([True, True, False])
        kmeans._reseed_empty(points, centroids, labels, occupied)
        # entries 0 and 1 tie at distance 5; the lower index wins
        assert centroids[2].tolist() == [0, 0, 0]

    def test_no_reseed_without_spare_entries(self):
        points = np.array([(0, 0, 0), (10, 0, 0)], dtype=np.float64)
        centroids = np.array([(0, 0, 0), (10, 0, 0), (7, 7, 7)], dtype=np.float64)
        kmeans._reseed_empty(points, centroids, np.array([0, 1]), np.array([True, True, False]))
        assert centroids[2].tolist() == [7, 7, 7]

    def test_histogram_is_sorted(self):
        pixels = np.array([RED, BLUE, RED, GREEN], dtype=np.uint8)
        colours, counts = kmeans.colour_histogram(pixels)
        assert [tuple(c) for c in colours.tolist()] == [BLUE, GREEN, RED]
        assert counts.tolist() == [1, 1, 2]


class TestMedianCut:
    def test_three_stripes(self):
        image = _pattern_image(10, 10, [RED, GREEN, BLUE])
        palette = registry.extract_palette(image, 3, 'median-cut')
        assert palette == [Color(*BLUE), Color(*GREEN), Color(*RED)]

    def test_two_boxes_average(self):
        palette = registry.extract_palette(_banded_image(), 2, 'median-cut')
        assert palette == [Color(5, 5, 5), Color(205, 205, 205)]

    def test_population_weighted_mean(self):
        pixels = np.array([(0, 0, 0)] * 3 + [(100, 100, 100)], dtype=np.uint8)
        assert registry.extract_palette(pixels, 1, 'median-cut') == [Color(25, 25, 25)]

    def test_fewer_distinct_colours_than_n(self):
        image = _pattern_image(10, 10, [RED, GREEN, BLUE])
        palette = registry.extract_palette(image, 8, 'median-cut')
        assert len(palette) == 3

    def test_solid_image_many_colours_requested(self):
        palette = registry.extract_palette(_solid_image(4, 4, GREEN), 16, 'median-cut')
        assert palette == [Color(*GREEN)]

    @pytest.mark.parametrize('n', [1, 2, 16, 100, 256])
    def test_exactly_n_with_enough_distinct_colours(self, n):
        image = _random_image(32, 32, seed=3)
        assert len(registry.extract_palette(image, n, 'median-cut')) == n

    def test_skewed_population_still_reaches_n(self):
        pixels = np.array([RED] * 90 + [GREEN] * 5 + [BLUE] * 5, dtype=np.uint8)
        palette = registry.extract_palette(pixels, 3, 'median-cut')
        assert sorted(c.rgb for c in palette) == sorted([RED, GREEN, BLUE])

    def test_split_picks_widest_channel(self):
        colours = np.array([(0, 0, 0), (0, 0, 200), (10, 0, 0)], dtype=np.uint8)
        box = median_cut.Box(colours, np.array([1, 1, 1]))
        lower, upper = box.split()
        assert upper.colours.tolist() == [[0, 0, 200]]
        assert lower.colours.tolist() == [[0, 0, 0], [10, 0, 0]]

    def test_split_moves_below_median_when_upper_would_be_empty(self):
        colours = np.array([(0, 0, 0), (50, 0, 0)], dtype=np.uint8)
        box = median_cut.Box(colours, np.array([1, 9]))
        lower, upper = box.split()
        assert lower.colours.tolist() == [[0, 0, 0]]
        assert upper.colours.tolist() == [[50, 0, 0]]

    def test_count_beyond_box_index_width(self):
        colours = np.array([(0, 0, 0)], dtype=np.uint8)
        with pytest.raises(QuantizationFailure):
            median_cut.cut(colours, np.array([1]), median_cut.MAX_BOXES + 1)
